# -*- coding: utf-8 -*-
"""
Integration Scorer - Cross-Standard Integration Engine

Measures how much duplication the equivalence classes remove from an
organization's combined clause universe, and where.

    total_clauses       = size of the clause universe
    unique_requirements = number of equivalence classes
    efficiency_percent  = round((1 - unique / total) * 100), 0 if empty

A class produces a saving only when it has more than one member AND
its members span more than one standard. Savings are ordered by
raw_count descending; ties keep class order.

Example:
    >>> scorer = IntegrationScorer()
    >>> score = scorer.score(builder.groups(), directory)
    >>> print(score.efficiency_percent, len(score.savings))
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

from complyhub.cross_standard.clause_index import ClauseDirectory
from complyhub.cross_standard.models import (
    EquivalenceSaving,
    IntegrationScore,
    StandardClause,
    round_percent,
)

logger = logging.getLogger(__name__)

__all__ = [
    "IntegrationScorer",
    "hls_group_of",
]


def hls_group_of(clause_number: str) -> str:
    """Return the top-level segment of a dotted clause number ("4.2" -> "4")."""
    return clause_number.split(".")[0]


class IntegrationScorer:
    """Computes the integration score from equivalence classes."""

    def score(
        self,
        groups: Dict[str, Set[str]],
        directory: ClauseDirectory,
    ) -> IntegrationScore:
        """Score duplication across the clause universe.

        Args:
            groups: Equivalence classes (representative -> members).
            directory: Clause directory for the same universe.

        Returns:
            IntegrationScore with savings sorted by raw_count descending.
        """
        total_clauses = len(directory)
        unique_requirements = len(groups)
        efficiency_percent = (
            round_percent((1 - unique_requirements / total_clauses) * 100)
            if total_clauses > 0 else 0
        )

        savings: List[EquivalenceSaving] = []
        for members in groups.values():
            if len(members) <= 1:
                continue
            saving = self._saving_for(members, directory)
            if saving is not None:
                savings.append(saving)

        savings.sort(key=lambda s: s.raw_count, reverse=True)

        logger.info(
            "Integration score: %d clauses -> %d unique requirements "
            "(%d%% efficiency, %d cross-standard savings)",
            total_clauses, unique_requirements, efficiency_percent,
            len(savings),
        )
        return IntegrationScore(
            total_clauses=total_clauses,
            unique_requirements=unique_requirements,
            efficiency_percent=efficiency_percent,
            savings=savings,
        )

    def _saving_for(
        self,
        members: Set[str],
        directory: ClauseDirectory,
    ) -> Optional[EquivalenceSaving]:
        """Build the saving for one class, or None if single-standard."""
        clauses: List[StandardClause] = []
        for clause_id in members:
            clause = directory.get(clause_id)
            if clause is not None:
                clauses.append(clause)
        if not clauses:
            return None

        standards = sorted({c.standard_code for c in clauses})
        if len(standards) <= 1:
            return None

        # Members are a set; pick the group from a stable member.
        first = min(clauses, key=lambda c: (c.clause_number, c.clause_id))
        return EquivalenceSaving(
            hls_group=hls_group_of(first.clause_number),
            raw_count=len(members),
            standards=standards,
        )
