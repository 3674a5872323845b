# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from complyhub.cross_standard.config import (
    CrossStandardConfig,
    reset_config,
    set_config,
)
from complyhub.cross_standard.models import (
    ClauseCoverage,
    ClauseCrossReference,
    CoverageStatus,
    CoverageTree,
    MappingType,
    StandardClause,
    StandardCoverage,
    TopLevelClause,
)

# (clause_id, clause_number, status)
LeafSpec = Tuple[str, str, str]

STANDARD_NAMES = {
    "ISO9001": "Quality Management",
    "ISO14001": "Environmental Management",
    "ISO45001": "Occupational Health and Safety",
    "ISO27001": "Information Security",
}


def build_tree(
    standards: Dict[str, Sequence[LeafSpec]],
    overall_coverage_percent: Optional[float] = None,
) -> CoverageTree:
    """Build a CoverageTree, grouping leaves under their top-level number."""
    built: List[StandardCoverage] = []
    for code, leaves in standards.items():
        tops: Dict[str, TopLevelClause] = {}
        for clause_id, number, status in leaves:
            group = number.split(".")[0]
            if group not in tops:
                tops[group] = TopLevelClause(
                    clause_id=f"{clause_id}-top",
                    clause_number=group,
                    title=f"Clause {group}",
                )
            tops[group].children.append(ClauseCoverage(
                clause_id=clause_id,
                clause_number=number,
                title=f"{code} {number}",
                status=CoverageStatus(status),
            ))
        built.append(StandardCoverage(
            code=code,
            name=STANDARD_NAMES.get(code, code),
            clauses=list(tops.values()),
        ))
    return CoverageTree(
        standards=built,
        overall_coverage_percent=overall_coverage_percent,
    )


def clause(clause_id: str, number: str, code: str) -> StandardClause:
    return StandardClause(
        clause_id=clause_id,
        clause_number=number,
        title=f"{code} {number}",
        standard_code=code,
        standard_name=STANDARD_NAMES.get(code, code),
    )


def xref(
    source: str,
    target: str,
    mapping_type: str = "EQUIVALENT",
    source_clause: Optional[StandardClause] = None,
    target_clause: Optional[StandardClause] = None,
) -> ClauseCrossReference:
    return ClauseCrossReference(
        source_clause_id=source,
        target_clause_id=target,
        mapping_type=MappingType(mapping_type),
        source_clause=source_clause,
        target_clause=target_clause,
    )


class StaticSources:
    """In-memory implementation of all three upstream sources."""

    def __init__(self, tree=None, cross_references=None, classifications=None):
        self.tree = tree if tree is not None else CoverageTree()
        self.cross_references = cross_references or []
        self.classifications = classifications or {}
        self.tree_calls: List[tuple] = []

    def get_coverage_tree(self, org_id, standard_code=None, project_id=None):
        self.tree_calls.append((org_id, standard_code, project_id))
        return self.tree

    def get_cross_references(self):
        return self.cross_references

    def get_document_classifications(self, document_id):
        return self.classifications.get(document_id, [])


@pytest.fixture(autouse=True)
def cross_standard_config():
    """Install a fresh config for every test and reset it afterwards."""
    config = CrossStandardConfig()
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def two_standard_tree() -> CoverageTree:
    """ISO9001 and ISO14001 with overlapping HLS clauses.

    ISO9001:  4.1 GAP, 4.2 COVERED, 6.1 PARTIAL
    ISO14001: 4.1 COVERED, 4.2 COVERED, 6.1 GAP
    """
    return build_tree({
        "ISO9001": [
            ("q-4.1", "4.1", "GAP"),
            ("q-4.2", "4.2", "COVERED"),
            ("q-6.1", "6.1", "PARTIAL"),
        ],
        "ISO14001": [
            ("e-4.1", "4.1", "COVERED"),
            ("e-4.2", "4.2", "COVERED"),
            ("e-6.1", "6.1", "GAP"),
        ],
    })


@pytest.fixture
def two_standard_refs() -> List[ClauseCrossReference]:
    """EQUIVALENT 4.1 and 4.2 pairs, RELATED 6.1 pair, with endpoint details."""
    return [
        xref("q-4.1", "e-4.1", "EQUIVALENT",
             clause("q-4.1", "4.1", "ISO9001"), clause("e-4.1", "4.1", "ISO14001")),
        xref("q-4.2", "e-4.2", "EQUIVALENT",
             clause("q-4.2", "4.2", "ISO9001"), clause("e-4.2", "4.2", "ISO14001")),
        xref("q-6.1", "e-6.1", "RELATED",
             clause("q-6.1", "6.1", "ISO9001"), clause("e-6.1", "6.1", "ISO14001")),
    ]


@pytest.fixture
def static_sources(two_standard_tree, two_standard_refs) -> StaticSources:
    return StaticSources(
        tree=two_standard_tree,
        cross_references=two_standard_refs,
        classifications={
            "doc-1": [{"standardClauseId": "q-4.1", "confidence": 0.9,
                       "clause": clause("q-4.1", "4.1", "ISO9001").model_dump()}],
        },
    )


@pytest.fixture
def tree_builder():
    return build_tree


@pytest.fixture
def make_xref():
    return xref


@pytest.fixture
def make_clause():
    return clause
