# -*- coding: utf-8 -*-
"""
HLS Cross-Reference Catalog - Cross-Standard Integration Engine

Helpers for seeding a cross-reference catalog. Every ISO management
system standard built on the High Level Structure (Annex SL) shares the
same sub-clause framework in clauses 4 to 10, so matching sub-clause
numbers across standards are EQUIVALENT. Curated RELATED and SUPPORTING
links between specific clauses are listed in ``DOMAIN_CROSS_REFERENCES``.

Specs are keyed by (standard code, clause number) because catalogs are
curated before clause identifiers exist. ``resolve_cross_references``
binds them to concrete clauses.

Example:
    >>> specs = generate_hls_cross_references(["ISO9001", "ISO14001"])
    >>> len(specs)
    21
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from complyhub.cross_standard.models import (
    ClauseCrossReference,
    CrossReferenceSpec,
    MappingType,
    StandardClause,
)

logger = logging.getLogger(__name__)

__all__ = [
    "COMMON_HLS_SUB_CLAUSES",
    "HLS_STANDARD_CODES",
    "DOMAIN_CROSS_REFERENCES",
    "generate_hls_cross_references",
    "resolve_cross_references",
]

COMMON_HLS_SUB_CLAUSES: Tuple[str, ...] = (
    "4.1", "4.2", "4.3", "4.4",
    "5.1", "5.2", "5.3",
    "6.1", "6.2",
    "7.1", "7.2", "7.3", "7.4", "7.5",
    "8.1", "8.2",
    "9.1", "9.2", "9.3",
    "10.1", "10.2",
)

HLS_STANDARD_CODES: Tuple[str, ...] = (
    "ISO9001", "ISO14001", "ISO45001",
    "ISO22301", "ISO27001", "ISO37001", "ISO39001",
)

DOMAIN_CROSS_REFERENCES: Tuple[CrossReferenceSpec, ...] = (
    CrossReferenceSpec(
        source_standard="ISO45001", source_clause_number="8.2",
        target_standard="ISO14001", target_clause_number="8.2",
        mapping_type=MappingType.RELATED,
        notes="Emergency preparedness and response: worker safety on one "
              "side, spills and releases on the other",
    ),
    CrossReferenceSpec(
        source_standard="ISO22301", source_clause_number="8.4",
        target_standard="ISO27001", target_clause_number="8.1",
        mapping_type=MappingType.RELATED,
        notes="Business continuity plans must cover information security "
              "continuity",
    ),
    CrossReferenceSpec(
        source_standard="ISO37001", source_clause_number="8.2",
        target_standard="ISO9001", target_clause_number="8.4",
        mapping_type=MappingType.SUPPORTING,
        notes="Due diligence on business associates supports external "
              "provider evaluation",
    ),
    CrossReferenceSpec(
        source_standard="ISO45001", source_clause_number="6.1",
        target_standard="ISO9001", target_clause_number="6.1",
        mapping_type=MappingType.RELATED,
        notes="Hazard identification feeds organizational risk management",
    ),
    CrossReferenceSpec(
        source_standard="ISO14001", source_clause_number="6.1",
        target_standard="ISO45001", target_clause_number="6.1",
        mapping_type=MappingType.RELATED,
        notes="Environmental compliance obligations overlap with OH&S "
              "legal requirements",
    ),
    CrossReferenceSpec(
        source_standard="ISO39001", source_clause_number="8.1",
        target_standard="ISO45001", target_clause_number="8.1",
        mapping_type=MappingType.RELATED,
        notes="Road traffic safety controls overlap with OH&S controls for "
              "transport and commuting",
    ),
    CrossReferenceSpec(
        source_standard="ISO27001", source_clause_number="7.3",
        target_standard="ISO37001", target_clause_number="7.3",
        mapping_type=MappingType.SUPPORTING,
        notes="Security awareness training can include anti-bribery modules",
    ),
    CrossReferenceSpec(
        source_standard="ISO9001", source_clause_number="10.2",
        target_standard="ISO14001", target_clause_number="10.2",
        mapping_type=MappingType.RELATED,
        notes="Corrective action procedures cover quality nonconformities "
              "and environmental incidents",
    ),
    CrossReferenceSpec(
        source_standard="ISO22301", source_clause_number="9.3",
        target_standard="ISO9001", target_clause_number="9.3",
        mapping_type=MappingType.SUPPORTING,
        notes="Continuity performance data feeds quality management review",
    ),
    CrossReferenceSpec(
        source_standard="ISO39001", source_clause_number="9.1",
        target_standard="ISO45001", target_clause_number="10.2",
        mapping_type=MappingType.RELATED,
        notes="Crash investigations feed OH&S incident management",
    ),
)


def generate_hls_cross_references(
    standard_codes: Sequence[str] = HLS_STANDARD_CODES,
    sub_clauses: Sequence[str] = COMMON_HLS_SUB_CLAUSES,
) -> List[CrossReferenceSpec]:
    """Generate EQUIVALENT specs for every pair of standards.

    For N standards and M sub-clauses this yields N*(N-1)/2 * M specs,
    ordered by standard pair (in input order) then sub-clause.

    Args:
        standard_codes: Standards sharing the HLS framework.
        sub_clauses: Shared sub-clause numbers.

    Returns:
        List of CrossReferenceSpec.
    """
    specs = [
        CrossReferenceSpec(
            source_standard=source,
            source_clause_number=number,
            target_standard=target,
            target_clause_number=number,
            mapping_type=MappingType.EQUIVALENT,
        )
        for source, target in combinations(standard_codes, 2)
        for number in sub_clauses
    ]
    logger.info(
        "Generated %d HLS cross-references for %d standards",
        len(specs), len(standard_codes),
    )
    return specs


def resolve_cross_references(
    specs: Iterable[CrossReferenceSpec],
    clauses: Iterable[StandardClause],
) -> List[ClauseCrossReference]:
    """Bind specs to concrete clauses.

    Specs whose endpoints are not among ``clauses`` are skipped. The
    first spec seen for an undirected clause pair wins; later specs for
    the same pair, in either direction, are dropped.

    Args:
        specs: Catalog specs keyed by standard code and clause number.
        clauses: Known clauses.

    Returns:
        ClauseCrossReference edges carrying endpoint details and notes.
    """
    by_key: Dict[Tuple[str, str], StandardClause] = {
        (c.standard_code, c.clause_number): c for c in clauses
    }
    seen: Set[Tuple[str, str]] = set()
    refs: List[ClauseCrossReference] = []
    skipped = 0

    for spec in specs:
        source = by_key.get((spec.source_standard, spec.source_clause_number))
        target = by_key.get((spec.target_standard, spec.target_clause_number))
        if source is None or target is None:
            skipped += 1
            logger.debug(
                "Cross-reference %s %s -> %s %s has unknown endpoint, skipped",
                spec.source_standard, spec.source_clause_number,
                spec.target_standard, spec.target_clause_number,
            )
            continue

        pair = tuple(sorted((source.clause_id, target.clause_id)))
        if pair in seen:
            continue
        seen.add(pair)

        refs.append(ClauseCrossReference(
            source_clause_id=source.clause_id,
            target_clause_id=target.clause_id,
            mapping_type=spec.mapping_type,
            source_clause=source,
            target_clause=target,
            notes=spec.notes,
        ))

    logger.info(
        "Resolved %d cross-references (%d skipped)", len(refs), skipped,
    )
    return refs
