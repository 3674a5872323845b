# -*- coding: utf-8 -*-
"""
Consolidated Readiness Calculator - Cross-Standard Integration Engine

Recomputes readiness over deduplicated equivalence classes. Each class
counts once, with the best status among its members
(COVERED > PARTIAL > GAP); there is no extra credit for a class with
several COVERED members.

    deduplicated_coverage = round(covered / classes * 100)
    weighted_score        = round((covered + partial * w) / classes * 100)

where ``w`` is the partial credit weight (0.5). ``raw_coverage`` is the
naive average across all clauses, passed through from the gap analysis
as a baseline. The per-standard breakdown is passed through unchanged
since deduplication only means something across standards.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Set

from complyhub.cross_standard.clause_index import ClauseDirectory
from complyhub.cross_standard.models import (
    ConsolidatedReadiness,
    CoverageStatus,
    CoverageTree,
    StandardBreakdown,
    round_percent,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ConsolidatedReadinessCalculator",
]

_DEFAULT_PARTIAL_CREDIT: float = 0.5


class ConsolidatedReadinessCalculator:
    """Computes deduplicated readiness from equivalence classes.

    Attributes:
        partial_credit_weight: Credit for a class whose best status is
            PARTIAL (COVERED earns 1, GAP earns 0).
    """

    def __init__(self, partial_credit_weight: float = _DEFAULT_PARTIAL_CREDIT) -> None:
        self.partial_credit_weight = partial_credit_weight

    def calculate(
        self,
        groups: Dict[str, Set[str]],
        directory: ClauseDirectory,
        tree: CoverageTree,
    ) -> ConsolidatedReadiness:
        """Calculate consolidated readiness.

        Args:
            groups: Equivalence classes (representative -> members).
            directory: Clause directory holding member statuses.
            tree: Gap-analysis output for raw coverage pass-through.

        Returns:
            ConsolidatedReadiness with per-standard breakdown.
        """
        tallies = {status: 0 for status in CoverageStatus}
        for members in groups.values():
            best = CoverageStatus.best(
                directory.status_of(m) or CoverageStatus.GAP for m in members
            )
            tallies[best] += 1

        covered = tallies[CoverageStatus.COVERED]
        partial = tallies[CoverageStatus.PARTIAL]
        total_classes = len(groups)

        if total_classes > 0:
            weighted_score = round_percent(
                (covered + partial * self.partial_credit_weight)
                / total_classes * 100
            )
            deduplicated_coverage = round_percent(covered / total_classes * 100)
        else:
            weighted_score = 0
            deduplicated_coverage = 0

        readiness = ConsolidatedReadiness(
            weighted_score=weighted_score,
            deduplicated_coverage=deduplicated_coverage,
            raw_coverage=tree.overall_coverage_percent or 0,
            total_classes=total_classes,
            deduplicated_covered=covered,
            deduplicated_partial=partial,
            deduplicated_gap=tallies[CoverageStatus.GAP],
            standards=self._breakdown(tree),
        )

        logger.info(
            "Consolidated readiness: %d classes (%d covered, %d partial, "
            "%d gap), weighted=%d%%, deduplicated=%d%%, raw=%s%%",
            total_classes, covered, partial, tallies[CoverageStatus.GAP],
            weighted_score, deduplicated_coverage, readiness.raw_coverage,
        )
        return readiness

    def _breakdown(self, tree: CoverageTree) -> List[StandardBreakdown]:
        """Pass the per-standard summary through from the gap analysis."""
        return [
            StandardBreakdown(
                standard_code=std.code,
                standard_name=std.name,
                raw_coverage=std.coverage_percent or 0,
                deduplicated_coverage=std.coverage_percent or 0,
                total_clauses=std.total_sub_clauses or 0,
                covered=std.covered or 0,
                partial=std.partial or 0,
                gaps=std.gaps or 0,
            )
            for std in tree.standards
        ]
