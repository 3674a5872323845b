# -*- coding: utf-8 -*-
"""
Gap Cascade Detector - Cross-Standard Integration Engine

Finds, for every clause that is not COVERED, the clauses in other
standards it puts at risk through cross-references of any mapping type.

Rules:
    - A source is a PARTIAL or GAP clause of the universe, processed once.
    - Targets are single-hop neighbors in a different standard. Neighbors
      outside the coverage universe are skipped.
    - A source with no qualifying targets produces no cascade.
    - Targets sort EQUIVALENT, RELATED, SUPPORTING, then by standard code.
    - impact_count counts distinct standards, the source's included.
    - Cascades sort by impact_count descending, then source clause number.
"""

from __future__ import annotations

import logging
from typing import List

from complyhub.cross_standard.clause_index import (
    ClauseDirectory,
    CrossReferenceGraph,
)
from complyhub.cross_standard.models import (
    CascadeTarget,
    CoverageStatus,
    GapCascade,
    StandardClause,
)

logger = logging.getLogger(__name__)

__all__ = [
    "GapCascadeDetector",
]


class GapCascadeDetector:
    """Detects cross-standard gap cascades over the cross-reference graph."""

    def detect(
        self,
        directory: ClauseDirectory,
        graph: CrossReferenceGraph,
    ) -> List[GapCascade]:
        """Detect gap cascades.

        Args:
            directory: Clause directory for the coverage universe.
            graph: Undirected cross-reference lookup.

        Returns:
            Cascades, highest cross-standard impact first.
        """
        cascades: List[GapCascade] = []

        # items() yields each universe clause once.
        for source, status in directory.items():
            if status == CoverageStatus.COVERED:
                continue

            targets = self._targets_for(source, directory, graph)
            if not targets:
                continue

            affected = {source.standard_code}
            affected.update(t.standard_code for t in targets)

            cascades.append(GapCascade(
                source_clause_id=source.clause_id,
                source_clause_number=source.clause_number,
                source_title=source.title,
                source_standard_code=source.standard_code,
                source_standard_name=source.standard_name,
                source_status=status,
                targets=targets,
                impact_count=len(affected),
            ))

        cascades.sort(key=lambda c: (-c.impact_count, c.source_clause_number))

        logger.info(
            "Gap cascades: %d sources threaten %d cross-standard clauses",
            len(cascades), sum(len(c.targets) for c in cascades),
        )
        return cascades

    @staticmethod
    def _targets_for(
        source: StandardClause,
        directory: ClauseDirectory,
        graph: CrossReferenceGraph,
    ) -> List[CascadeTarget]:
        """Resolve cross-standard neighbors of a deficient clause."""
        targets: List[CascadeTarget] = []
        for neighbor in graph.neighbors(source.clause_id):
            target = directory.get(neighbor.clause_id)
            target_status = directory.status_of(neighbor.clause_id)
            if target is None or target_status is None:
                logger.debug(
                    "Cascade target %s of %s not in coverage universe, skipped",
                    neighbor.clause_id, source.clause_id,
                )
                continue
            if target.standard_code == source.standard_code:
                continue
            targets.append(CascadeTarget(
                clause_id=target.clause_id,
                clause_number=target.clause_number,
                title=target.title,
                standard_code=target.standard_code,
                standard_name=target.standard_name,
                status=target_status,
                mapping_type=neighbor.mapping_type,
            ))

        targets.sort(key=lambda t: (t.mapping_type.sort_order, t.standard_code))
        return targets
