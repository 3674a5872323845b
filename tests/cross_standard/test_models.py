# -*- coding: utf-8 -*-
"""Tests for cross-standard data models."""

import pytest
from pydantic import ValidationError

from complyhub.cross_standard.models import (
    ClauseCoverage,
    ClauseCrossReference,
    CoverageStatus,
    CoverageTree,
    DocumentClassification,
    IntegrationScore,
    MappingType,
    StandardClause,
    StandardCoverage,
    TopLevelClause,
    round_percent,
)


class TestRoundPercent:
    """Half-up rounding."""

    @pytest.mark.parametrize("value, expected", [
        (0.0, 0), (2.5, 3), (12.5, 13), (62.5, 63), (33.33, 33), (99.5, 100),
    ])
    def test_half_up(self, value, expected):
        """Halves round away from zero, unlike round()."""
        assert round_percent(value) == expected


class TestEnumerations:
    """Status rank and mapping order."""

    def test_status_rank(self):
        """COVERED > PARTIAL > GAP."""
        assert CoverageStatus.COVERED.rank > CoverageStatus.PARTIAL.rank
        assert CoverageStatus.PARTIAL.rank > CoverageStatus.GAP.rank

    def test_best_and_worst(self):
        """Selection goes through rank."""
        statuses = [CoverageStatus.PARTIAL, CoverageStatus.GAP, CoverageStatus.COVERED]
        assert CoverageStatus.best(statuses) == CoverageStatus.COVERED
        assert CoverageStatus.worst(statuses) == CoverageStatus.GAP
        assert CoverageStatus.best([]) == CoverageStatus.GAP
        assert CoverageStatus.worst([]) == CoverageStatus.GAP

    def test_mapping_sort_order(self):
        """EQUIVALENT, RELATED, SUPPORTING."""
        ordered = sorted(MappingType, key=lambda m: m.sort_order, reverse=True)
        assert ordered == [MappingType.SUPPORTING, MappingType.RELATED,
                           MappingType.EQUIVALENT]


class TestInputModels:
    """Validation and aliases."""

    def test_accepts_camel_and_snake_case(self):
        """Both spellings validate to the same model."""
        camel = ClauseCrossReference.model_validate({
            "sourceClauseId": "a", "targetClauseId": "b", "mappingType": "RELATED",
        })
        snake = ClauseCrossReference.model_validate({
            "source_clause_id": "a", "target_clause_id": "b", "mapping_type": "RELATED",
        })
        assert camel == snake

    def test_dumps_camel_case(self):
        """by_alias output uses camelCase keys."""
        clause = StandardClause(
            clause_id="a", clause_number="4.1", standard_code="ISO9001",
        )
        assert set(clause.model_dump(by_alias=True)) == {
            "clauseId", "clauseNumber", "title", "standardCode", "standardName",
        }

    def test_input_extra_fields_ignored(self):
        """Input models drop keys the engine does not use."""
        ref = ClauseCrossReference.model_validate({
            "sourceClauseId": "a", "targetClauseId": "b",
            "mappingType": "RELATED", "weight": 3,
        })
        assert "weight" not in ref.model_dump()

    def test_result_extra_fields_forbidden(self):
        """Result models reject unknown keys."""
        with pytest.raises(ValidationError):
            IntegrationScore.model_validate({"totalClauses": 1, "weight": 3})

    def test_coverage_status_alias(self):
        """Leaf status may arrive as coverageStatus."""
        leaf = ClauseCoverage.model_validate({
            "clauseId": "a", "clauseNumber": "4.1", "coverageStatus": "PARTIAL",
        })
        assert leaf.status == CoverageStatus.PARTIAL
        assert leaf.model_dump(by_alias=True)["status"] == CoverageStatus.PARTIAL

    def test_unknown_mapping_type(self):
        """Mapping types outside the enum are rejected."""
        with pytest.raises(ValidationError):
            ClauseCrossReference(
                source_clause_id="a", target_clause_id="b", mapping_type="SIMILAR",
            )

    def test_clause_is_frozen(self):
        """StandardClause instances are immutable."""
        clause = StandardClause(
            clause_id="a", clause_number="4.1", standard_code="ISO9001",
        )
        with pytest.raises(ValidationError):
            clause.title = "changed"

    def test_blank_clause_id_rejected(self):
        """clause_id must be non-empty."""
        with pytest.raises(ValidationError):
            StandardClause(clause_id="  ", clause_number="4.1", standard_code="X")

    def test_confidence_bounds(self):
        """Confidence must stay within [0, 1]."""
        assert DocumentClassification(standard_clause_id="a").confidence == 1.0
        with pytest.raises(ValidationError):
            DocumentClassification(standard_clause_id="a", confidence=1.2)


class TestDerivedCoverage:
    """Counts derived from leaf clauses."""

    def _standard(self, *statuses, **overrides):
        return StandardCoverage(
            code="ISO9001",
            clauses=[TopLevelClause(
                clause_number="4",
                children=[
                    ClauseCoverage(clause_id=f"c{i}", clause_number=f"4.{i}",
                                   status=CoverageStatus(s))
                    for i, s in enumerate(statuses, start=1)
                ],
            )],
            **overrides,
        )

    def test_counts_derived(self):
        """Missing counts are computed from the leaves."""
        standard = self._standard("COVERED", "COVERED", "PARTIAL", "GAP")
        assert standard.total_sub_clauses == 4
        assert (standard.covered, standard.partial, standard.gaps) == (2, 1, 1)
        assert standard.coverage_percent == 50

    def test_supplied_counts_kept(self):
        """Adapter-supplied counts are not overwritten."""
        standard = self._standard("GAP", coverage_percent=80.0, covered=8)
        assert standard.coverage_percent == 80.0
        assert standard.covered == 8

    def test_overall_coverage_derived(self):
        """Overall coverage is covered leaves over all leaves."""
        tree = CoverageTree(standards=[
            self._standard("COVERED", "GAP"),
            self._standard("COVERED"),
        ])
        # 2 of 3 leaves = 66.67%
        assert tree.overall_coverage_percent == 67

    def test_empty_tree(self):
        """An empty tree has 0% overall coverage."""
        assert CoverageTree().overall_coverage_percent == 0
