# -*- coding: utf-8 -*-
"""Tests for the HLS cross-reference catalog helpers."""

from complyhub.cross_standard.catalog import (
    COMMON_HLS_SUB_CLAUSES,
    DOMAIN_CROSS_REFERENCES,
    HLS_STANDARD_CODES,
    generate_hls_cross_references,
    resolve_cross_references,
)
from complyhub.cross_standard.models import CrossReferenceSpec, MappingType


class TestGenerateHlsCrossReferences:
    """EQUIVALENT spec generation."""

    def test_common_sub_clauses(self):
        """21 shared sub-clauses from 4.1 to 10.2."""
        assert len(COMMON_HLS_SUB_CLAUSES) == 21
        assert COMMON_HLS_SUB_CLAUSES[0] == "4.1"
        assert COMMON_HLS_SUB_CLAUSES[-1] == "10.2"

    def test_full_catalog_size(self):
        """7 standards give 21 pairs of 21 sub-clauses."""
        specs = generate_hls_cross_references()
        assert len(HLS_STANDARD_CODES) == 7
        assert len(specs) == 21 * 21
        assert all(s.mapping_type == MappingType.EQUIVALENT for s in specs)

    def test_pair_order(self):
        """Specs run pair by pair in input order, then by sub-clause."""
        specs = generate_hls_cross_references(
            ["A", "B", "C"], sub_clauses=["4.1", "5.1"],
        )
        assert [(s.source_standard, s.target_standard, s.source_clause_number)
                for s in specs] == [
            ("A", "B", "4.1"), ("A", "B", "5.1"),
            ("A", "C", "4.1"), ("A", "C", "5.1"),
            ("B", "C", "4.1"), ("B", "C", "5.1"),
        ]
        assert all(s.source_clause_number == s.target_clause_number for s in specs)

    def test_single_standard(self):
        """One standard has no pairs."""
        assert generate_hls_cross_references(["A"]) == []


class TestDomainCrossReferences:
    """Curated RELATED and SUPPORTING links."""

    def test_never_equivalent(self):
        """Curated links never merge clauses."""
        assert DOMAIN_CROSS_REFERENCES
        assert all(
            s.mapping_type in (MappingType.RELATED, MappingType.SUPPORTING)
            for s in DOMAIN_CROSS_REFERENCES
        )
        assert all(s.notes for s in DOMAIN_CROSS_REFERENCES)

    def test_link_different_standards(self):
        """Every curated link crosses standards."""
        assert all(
            s.source_standard != s.target_standard for s in DOMAIN_CROSS_REFERENCES
        )


class TestResolveCrossReferences:
    """Binding specs to clauses."""

    def test_resolves_with_details(self, make_clause):
        """Resolved edges carry ids, endpoint details and notes."""
        clauses = [
            make_clause("q-8.2", "8.2", "ISO9001"),
            make_clause("o-8.2", "8.2", "ISO45001"),
        ]
        spec = CrossReferenceSpec(
            source_standard="ISO45001", source_clause_number="8.2",
            target_standard="ISO9001", target_clause_number="8.2",
            mapping_type=MappingType.RELATED, notes="emergencies",
        )
        refs = resolve_cross_references([spec], clauses)

        assert len(refs) == 1
        ref = refs[0]
        assert (ref.source_clause_id, ref.target_clause_id) == ("o-8.2", "q-8.2")
        assert ref.mapping_type == MappingType.RELATED
        assert ref.source_clause.standard_code == "ISO45001"
        assert ref.notes == "emergencies"

    def test_unknown_endpoint_skipped(self, make_clause):
        """Specs naming clauses that do not exist are dropped."""
        clauses = [make_clause("q-4.1", "4.1", "ISO9001")]
        specs = generate_hls_cross_references(["ISO9001", "ISO14001"], ["4.1"])
        assert resolve_cross_references(specs, clauses) == []

    def test_duplicate_pairs_dropped(self, make_clause):
        """The first spec for an undirected pair wins."""
        clauses = [
            make_clause("q", "6.1", "ISO9001"),
            make_clause("e", "6.1", "ISO14001"),
        ]
        specs = [
            CrossReferenceSpec(
                source_standard="ISO9001", source_clause_number="6.1",
                target_standard="ISO14001", target_clause_number="6.1",
            ),
            CrossReferenceSpec(
                source_standard="ISO14001", source_clause_number="6.1",
                target_standard="ISO9001", target_clause_number="6.1",
                mapping_type=MappingType.RELATED,
            ),
        ]
        refs = resolve_cross_references(specs, clauses)
        assert len(refs) == 1
        assert refs[0].mapping_type == MappingType.EQUIVALENT

    def test_generated_catalog_feeds_pipeline(self, tree_builder, make_clause):
        """Generated edges merge matching sub-clauses across standards."""
        from complyhub.cross_standard.integration_pipeline import (
            CrossStandardIntegrationPipeline,
        )

        tree = tree_builder({
            "ISO9001": [("q-4.1", "4.1", "GAP"), ("q-5.1", "5.1", "COVERED")],
            "ISO14001": [("e-4.1", "4.1", "COVERED"), ("e-5.1", "5.1", "GAP")],
        })
        clauses = [
            make_clause(cid, number, code)
            for cid, number, code in [
                ("q-4.1", "4.1", "ISO9001"), ("q-5.1", "5.1", "ISO9001"),
                ("e-4.1", "4.1", "ISO14001"), ("e-5.1", "5.1", "ISO14001"),
            ]
        ]
        refs = resolve_cross_references(
            generate_hls_cross_references(["ISO9001", "ISO14001"]), clauses,
        )
        summary = CrossStandardIntegrationPipeline().run(tree, refs)

        assert len(refs) == 2
        assert summary.integration_score.unique_requirements == 2
        assert summary.consolidated_readiness.deduplicated_coverage == 100
