# -*- coding: utf-8 -*-
"""
Document Suggestion Engine - Cross-Standard Integration Engine

Reuses the cross-reference graph outside the summary computation:

    suggest:          for a document already classified against some
                      clauses, propose EQUIVALENT clauses of other
                      standards as additional classifications
    equivalent_gaps:  for one clause, list every linked clause with its
                      current coverage status (corrective-action view)

Both are read-only and advisory. Nothing is ever applied; callers
confirm suggestions through their own workflow.

Example:
    >>> engine = DocumentSuggestionEngine()
    >>> suggestions = engine.suggest(classifications, graph, directory)
    >>> [s.suggested_clause_id for s in suggestions if not s.already_classified]
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Set, Tuple

from complyhub.cross_standard.clause_index import (
    ClauseDirectory,
    CrossReferenceGraph,
)
from complyhub.cross_standard.models import (
    CoverageStatus,
    DocumentClassification,
    DocumentSuggestion,
    EquivalentGap,
    MappingType,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DocumentSuggestionEngine",
    "find_equivalent_gaps",
]


class DocumentSuggestionEngine:
    """Suggests cross-standard classifications from EQUIVALENT edges."""

    def suggest(
        self,
        classifications: Sequence[DocumentClassification],
        graph: CrossReferenceGraph,
        directory: ClauseDirectory,
    ) -> List[DocumentSuggestion]:
        """Suggest additional clause classifications for one document.

        Args:
            classifications: The document's existing classifications.
            graph: Undirected cross-reference lookup.
            directory: Clause identities for classified and linked clauses.

        Returns:
            Suggestions, unclassified first, then by suggested standard code.
        """
        if not classifications:
            return []

        classified: Set[str] = {c.standard_clause_id for c in classifications}
        seen_pairs: Set[Tuple[str, str]] = set()
        suggestions: List[DocumentSuggestion] = []

        for classification in classifications:
            source = directory.get(classification.standard_clause_id)
            if source is None:
                logger.warning(
                    "Classified clause %s unknown, no suggestions derived",
                    classification.standard_clause_id,
                )
                continue

            for neighbor in graph.neighbors(
                source.clause_id, MappingType.EQUIVALENT,
            ):
                pair = (source.clause_id, neighbor.clause_id)
                if pair in seen_pairs:
                    continue
                seen_pairs.add(pair)

                suggested = directory.get(neighbor.clause_id)
                if suggested is None:
                    continue
                if suggested.standard_code == source.standard_code:
                    continue

                suggestions.append(DocumentSuggestion(
                    source_clause_id=source.clause_id,
                    source_clause_number=source.clause_number,
                    source_standard_code=source.standard_code,
                    source_confidence=classification.confidence,
                    suggested_clause_id=suggested.clause_id,
                    suggested_clause_number=suggested.clause_number,
                    suggested_clause_title=suggested.title,
                    suggested_standard_code=suggested.standard_code,
                    suggested_standard_name=suggested.standard_name,
                    already_classified=suggested.clause_id in classified,
                ))

        suggestions.sort(
            key=lambda s: (s.already_classified, s.suggested_standard_code),
        )
        logger.info(
            "Document suggestions: %d from %d classifications (%d new)",
            len(suggestions), len(classifications),
            sum(1 for s in suggestions if not s.already_classified),
        )
        return suggestions

    def equivalent_gaps(
        self,
        clause_id: str,
        graph: CrossReferenceGraph,
        directory: ClauseDirectory,
    ) -> List[EquivalentGap]:
        """List clauses linked to ``clause_id`` with their coverage status.

        Clauses outside the organization's coverage universe are reported
        as GAP. Linked clauses with no known identity are skipped.

        Args:
            clause_id: The clause a finding was raised against.
            graph: Undirected cross-reference lookup.
            directory: Clause identities and statuses.

        Returns:
            Linked clauses, EQUIVALENT first, then by standard code.
        """
        results: List[EquivalentGap] = []
        for neighbor in graph.neighbors(clause_id):
            linked = directory.get(neighbor.clause_id)
            if linked is None:
                continue
            results.append(EquivalentGap(
                clause_id=linked.clause_id,
                clause_number=linked.clause_number,
                title=linked.title,
                standard_code=linked.standard_code,
                standard_name=linked.standard_name,
                status=directory.status_of(linked.clause_id) or CoverageStatus.GAP,
                mapping_type=neighbor.mapping_type,
            ))

        results.sort(key=lambda r: (r.mapping_type.sort_order, r.standard_code))
        return results


def find_equivalent_gaps(
    clause_id: str,
    graph: CrossReferenceGraph,
    directory: ClauseDirectory,
) -> List[EquivalentGap]:
    """Module-level shortcut for ``DocumentSuggestionEngine().equivalent_gaps``."""
    return DocumentSuggestionEngine().equivalent_gaps(clause_id, graph, directory)
