# -*- coding: utf-8 -*-
"""
Shared Requirements Matrix Builder - Cross-Standard Integration Engine

Projects each standard's top-level clause status onto the fixed HLS
groups for side-by-side comparison, so that standards with structurally
identical clauses can be compared even where no cross-reference exists.

For a group number ``g`` a standard matches on the top-level clause
numbered ``g`` or ``g.``. The clause's aggregate status is

    COVERED  if every child is COVERED
    PARTIAL  else if any child is COVERED or PARTIAL
    GAP      otherwise (including a clause with no children)

This aggregation is a policy choice: one GAP child among COVERED
siblings yields PARTIAL, not GAP.

Rows are emitted only for groups matched by two or more standards. A row
is inconsistent when its cells disagree on status.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from complyhub.cross_standard.models import (
    HLS_GROUPS,
    CoverageStatus,
    CoverageTree,
    MatrixCell,
    SharedRequirementsRow,
    StandardCoverage,
    TopLevelClause,
)

logger = logging.getLogger(__name__)

__all__ = [
    "SharedRequirementsMatrixBuilder",
    "aggregate_status",
]

_MIN_CELLS_PER_ROW: int = 2


def aggregate_status(top_clause: TopLevelClause) -> CoverageStatus:
    """Derive a top-level clause's status from its children."""
    statuses = [child.status for child in top_clause.children]
    if not statuses:
        return CoverageStatus.GAP
    if all(s == CoverageStatus.COVERED for s in statuses):
        return CoverageStatus.COVERED
    if any(s in (CoverageStatus.COVERED, CoverageStatus.PARTIAL) for s in statuses):
        return CoverageStatus.PARTIAL
    return CoverageStatus.GAP


class SharedRequirementsMatrixBuilder:
    """Builds the HLS shared-requirements matrix.

    Attributes:
        hls_groups: Ordered group number -> title taxonomy. Defaults to
            the seven ISO Annex SL groups.
    """

    def __init__(self, hls_groups: Optional[Mapping[str, str]] = None) -> None:
        self.hls_groups = hls_groups if hls_groups is not None else HLS_GROUPS

    def build(self, tree: CoverageTree) -> List[SharedRequirementsRow]:
        """Build one row per HLS group shared by two or more standards.

        Args:
            tree: Gap-analysis output.

        Returns:
            Rows in taxonomy order, cells in standard order.
        """
        rows: List[SharedRequirementsRow] = []

        for group_number, group_title in self.hls_groups.items():
            cells: List[MatrixCell] = []
            for standard in tree.standards:
                top_clause = self._find_top_clause(standard, group_number)
                if top_clause is None:
                    continue
                cells.append(MatrixCell(
                    standard_code=standard.code,
                    status=aggregate_status(top_clause),
                    clause_id=top_clause.clause_id,
                    clause_number=top_clause.clause_number,
                    title=top_clause.title,
                ))

            if len(cells) < _MIN_CELLS_PER_ROW:
                continue

            rows.append(SharedRequirementsRow(
                hls_group=group_number,
                hls_title=group_title,
                cells=cells,
                has_inconsistency=len({c.status for c in cells}) > 1,
            ))

        logger.info(
            "Shared requirements matrix: %d rows, %d inconsistent",
            len(rows), sum(1 for r in rows if r.has_inconsistency),
        )
        return rows

    @staticmethod
    def _find_top_clause(
        standard: StandardCoverage,
        group_number: str,
    ) -> Optional[TopLevelClause]:
        """Return the standard's top-level clause for a group, if any."""
        for top_clause in standard.clauses:
            if top_clause.clause_number in (group_number, f"{group_number}."):
                return top_clause
        return None
