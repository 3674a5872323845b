# -*- coding: utf-8 -*-
"""Tests for upstream source protocols and payload validation."""

import pytest

from complyhub.cross_standard.models import CoverageStatus, CoverageTree, MappingType
from complyhub.cross_standard.sources import (
    ClassificationSource,
    CoverageTreeSource,
    CrossReferenceSource,
    resolve,
    to_classifications,
    to_coverage_tree,
    to_cross_references,
)
from complyhub.exceptions import InvalidSchema


class TestProtocols:
    """Structural typing of sources."""

    def test_static_sources_satisfy_protocols(self, static_sources):
        """An object with the three methods satisfies every protocol."""
        assert isinstance(static_sources, CoverageTreeSource)
        assert isinstance(static_sources, CrossReferenceSource)
        assert isinstance(static_sources, ClassificationSource)

    def test_missing_method(self):
        """Objects without the method do not satisfy the protocol."""
        assert not isinstance(object(), CrossReferenceSource)


class TestResolve:
    """Sync and async results."""

    @pytest.mark.asyncio
    async def test_plain_value(self):
        """Plain values pass through."""
        assert await resolve([1, 2]) == [1, 2]

    @pytest.mark.asyncio
    async def test_awaitable(self):
        """Awaitables are awaited."""
        async def fetch():
            return "done"

        assert await resolve(fetch()) == "done"


class TestPayloadValidation:
    """Boundary validation into models."""

    def test_tree_instance_passthrough(self, two_standard_tree):
        """Model instances are returned unchanged."""
        assert to_coverage_tree(two_standard_tree) is two_standard_tree

    def test_tree_from_dict(self):
        """camelCase dicts validate with derived counts."""
        tree = to_coverage_tree({
            "standards": [{
                "code": "ISO9001",
                "name": "Quality Management",
                "clauses": [{
                    "clauseNumber": "4",
                    "title": "Context",
                    "children": [
                        {"clauseId": "a", "clauseNumber": "4.1", "status": "COVERED"},
                        {"clauseId": "b", "clauseNumber": "4.2", "status": "GAP"},
                    ],
                }],
            }],
        })
        assert isinstance(tree, CoverageTree)
        assert tree.standards[0].covered == 1
        assert tree.overall_coverage_percent == 50

    def test_gap_analysis_adapter_shape(self):
        """Extra gap-analysis fields are ignored and counts kept."""
        leaf = {
            "clauseId": "a", "clauseNumber": "4.1", "title": "Context",
            "description": None, "status": "COVERED", "docCount": 2,
            "checklistCompliantCount": 3, "checklistTotalCount": 4,
            "crossRefCount": 6,
        }
        tree = to_coverage_tree({
            "totalSubClauses": 2, "covered": 1, "partial": 0, "gaps": 1,
            "overallCoveragePercent": 50,
            "standards": [{
                "standardId": "std-1", "code": "ISO9001",
                "name": "Quality Management", "coveragePercent": 50,
                "totalSubClauses": 2, "covered": 1, "partial": 0, "gaps": 1,
                "clauses": [{
                    "clauseId": "top-4", "clauseNumber": "4", "title": "Context",
                    "description": "Clause 4", "status": "PARTIAL",
                    "children": [
                        leaf,
                        {**leaf, "clauseId": "b", "clauseNumber": "4.2",
                         "status": "GAP"},
                    ],
                }],
            }],
        })

        standard = tree.standards[0]
        assert tree.overall_coverage_percent == 50
        assert standard.coverage_percent == 50
        assert [c.status for c in standard.leaf_clauses()] == [
            CoverageStatus.COVERED, CoverageStatus.GAP,
        ]

    def test_coverage_status_key(self):
        """Leaves keyed coverageStatus validate."""
        tree = to_coverage_tree({"standards": [{"code": "X", "clauses": [{
            "clauseNumber": "4",
            "children": [{"clauseId": "a", "clauseNumber": "4.1",
                          "coverageStatus": "PARTIAL"}],
        }]}]})
        assert tree.standards[0].partial == 1

    def test_bad_tree(self):
        """Invalid statuses raise InvalidSchema."""
        with pytest.raises(InvalidSchema) as exc_info:
            to_coverage_tree({"standards": [{"code": "X", "clauses": [{
                "clauseNumber": "4",
                "children": [{"clauseId": "a", "clauseNumber": "4.1",
                              "status": "DONE"}],
            }]}]})
        assert exc_info.value.context["data_source"] == "coverage_tree"
        assert exc_info.value.context["validation_errors"]

    def test_cross_references(self):
        """Edge dicts validate, None means no edges."""
        refs = to_cross_references([
            {"sourceClauseId": "a", "targetClauseId": "b", "mappingType": "SUPPORTING"},
        ])
        assert refs[0].mapping_type == MappingType.SUPPORTING
        assert to_cross_references(None) == []

    def test_bad_cross_references(self):
        """A non-iterable payload raises InvalidSchema."""
        with pytest.raises(InvalidSchema):
            to_cross_references(42)

    def test_classifications(self):
        """Classification dicts validate with default confidence."""
        items = to_classifications([{"standardClauseId": "a"}])
        assert items[0].confidence == 1.0

    def test_bad_classifications(self):
        """Out-of-range confidence raises InvalidSchema."""
        with pytest.raises(InvalidSchema) as exc_info:
            to_classifications([{"standardClauseId": "a", "confidence": 2}])
        assert exc_info.value.context["data_source"] == "document_classifications"
