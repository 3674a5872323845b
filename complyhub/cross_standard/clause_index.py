# -*- coding: utf-8 -*-
"""
Clause Index - Cross-Standard Integration Engine

Lookup structures built once per invocation at the boundary where the
coverage tree and cross-reference edges are loaded:

    ClauseDirectory:     clause id -> identity (number, title, standard)
                         and, for clauses in the coverage tree, status
    CrossReferenceGraph: clause id -> neighbors, with every edge stored
                         in both directions

Downstream components never branch on edge direction and never touch
the raw tree. Clause ids that cannot be resolved are skipped by the
callers rather than raising, because catalog and coverage data may be
briefly out of sync.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from complyhub.cross_standard.models import (
    ClauseCrossReference,
    CoverageStatus,
    CoverageTree,
    DocumentClassification,
    MappingType,
    StandardClause,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ClauseDirectory",
    "CrossReferenceGraph",
    "Neighbor",
]


# =============================================================================
# ClauseDirectory
# =============================================================================


class ClauseDirectory:
    """Clause identities plus coverage statuses for the tracked universe.

    The tracked universe is the set of leaf clauses of the coverage
    tree, in tree order. Clauses known only from cross-reference
    endpoints or document classifications have an identity but no
    status and are not part of the universe.
    """

    def __init__(self) -> None:
        self._clauses: Dict[str, StandardClause] = {}
        self._statuses: Dict[str, CoverageStatus] = {}

    @classmethod
    def from_coverage_tree(cls, tree: CoverageTree) -> ClauseDirectory:
        """Index every leaf clause of a coverage tree.

        Args:
            tree: Gap-analysis output.

        Returns:
            ClauseDirectory whose universe is the tree's leaf clauses.
        """
        directory = cls()
        for standard in tree.standards:
            for leaf in standard.leaf_clauses():
                directory._clauses[leaf.clause_id] = StandardClause(
                    clause_id=leaf.clause_id,
                    clause_number=leaf.clause_number,
                    title=leaf.title,
                    standard_code=standard.code,
                    standard_name=standard.name,
                )
                directory._statuses[leaf.clause_id] = leaf.status
        return directory

    def __len__(self) -> int:
        return len(self._statuses)

    def __contains__(self, clause_id: object) -> bool:
        return clause_id in self._statuses

    def __iter__(self) -> Iterator[str]:
        return iter(self._statuses)

    def register(self, clause: Optional[StandardClause]) -> None:
        """Record a clause identity without a status.

        Identities already known (e.g. from the coverage tree) win.
        """
        if clause is not None and clause.clause_id not in self._clauses:
            self._clauses[clause.clause_id] = clause

    def register_cross_references(
        self,
        cross_references: Iterable[ClauseCrossReference],
    ) -> None:
        """Record endpoint details carried by cross-reference edges."""
        for ref in cross_references:
            self.register(ref.source_clause)
            self.register(ref.target_clause)

    def register_classifications(
        self,
        classifications: Iterable[DocumentClassification],
    ) -> None:
        """Record clause details carried by document classifications."""
        for classification in classifications:
            self.register(classification.clause)

    def get(self, clause_id: str) -> Optional[StandardClause]:
        """Return the clause identity, or None if unknown."""
        return self._clauses.get(clause_id)

    def status_of(self, clause_id: str) -> Optional[CoverageStatus]:
        """Return the coverage status, or None outside the universe."""
        return self._statuses.get(clause_id)

    def items(self) -> Iterator[tuple]:
        """Yield (clause, status) for the universe in tree order."""
        for clause_id, status in self._statuses.items():
            yield self._clauses[clause_id], status


# =============================================================================
# CrossReferenceGraph
# =============================================================================


@dataclass(frozen=True)
class Neighbor:
    """The far endpoint of an edge as seen from one clause."""

    clause_id: str
    mapping_type: MappingType


class CrossReferenceGraph:
    """Undirected neighbor lookup over cross-reference edges.

    Each edge is stored under both endpoints, preserving edge order.
    Self-referencing edges are dropped.
    """

    def __init__(self) -> None:
        self._adjacency: Dict[str, List[Neighbor]] = defaultdict(list)
        self._edge_count = 0

    @classmethod
    def from_cross_references(
        cls,
        cross_references: Iterable[ClauseCrossReference],
    ) -> CrossReferenceGraph:
        """Normalize directed edges into an undirected lookup."""
        graph = cls()
        for ref in cross_references:
            graph.add_edge(
                ref.source_clause_id, ref.target_clause_id, ref.mapping_type,
            )
        return graph

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def add_edge(self, a: str, b: str, mapping_type: MappingType) -> None:
        """Add an undirected edge between clauses a and b."""
        if a == b:
            logger.debug("Ignoring self-referencing cross-reference on %s", a)
            return
        self._adjacency[a].append(Neighbor(b, mapping_type))
        self._adjacency[b].append(Neighbor(a, mapping_type))
        self._edge_count += 1

    def neighbors(
        self,
        clause_id: str,
        mapping_type: Optional[MappingType] = None,
    ) -> List[Neighbor]:
        """Return neighbors of a clause, optionally of one mapping type."""
        found = self._adjacency.get(clause_id, [])
        if mapping_type is None:
            return list(found)
        return [n for n in found if n.mapping_type == mapping_type]
