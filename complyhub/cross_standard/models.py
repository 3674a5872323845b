# -*- coding: utf-8 -*-
"""
Cross-Standard Integration Engine Data Models

Pydantic v2 data models for the Cross-Standard Integration Engine.
Every model serializes with camelCase aliases
(``model.model_dump(by_alias=True)``) so the presentation layer receives
the field names it already uses (``clauseNumber``, ``impactCount``, ...),
and accepts either spelling on input. Input models ignore keys the
engine does not use; result models reject unknown keys.

Enumerations (2):
    - CoverageStatus, MappingType

Input models (7):
    - StandardClause, ClauseCoverage, TopLevelClause, StandardCoverage,
      CoverageTree, ClauseCrossReference, DocumentClassification

Result models (11):
    - EquivalenceSaving, IntegrationScore, StandardBreakdown,
      ConsolidatedReadiness, MatrixCell, SharedRequirementsRow,
      CascadeTarget, GapCascade, CrossStandardSummary,
      DocumentSuggestion, EquivalentGap

Catalog models (1):
    - CrossReferenceSpec
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: ISO High Level Structure (Annex SL) top-level clause groups.
HLS_GROUPS: Mapping[str, str] = MappingProxyType({
    "4": "Context of the organization",
    "5": "Leadership",
    "6": "Planning",
    "7": "Support",
    "8": "Operation",
    "9": "Performance evaluation",
    "10": "Improvement",
})

#: Result model configuration: strict fields, camelCase aliases.
_MODEL_CONFIG = {
    "extra": "forbid",
    "populate_by_name": True,
    "alias_generator": to_camel,
}

#: Upstream payloads carry fields the engine does not use; drop them.
_INPUT_MODEL_CONFIG = {**_MODEL_CONFIG, "extra": "ignore"}


def round_percent(value: float) -> int:
    """Round a non-negative percentage half up (2.5 -> 3, not 2)."""
    return int(value + 0.5)


# =============================================================================
# Enumerations
# =============================================================================


class CoverageStatus(str, Enum):
    """Externally computed coverage state of a clause.

    Ranked COVERED > PARTIAL > GAP. Any "best of" selection must go
    through ``rank``; the string values carry no ordering.
    """

    COVERED = "COVERED"
    PARTIAL = "PARTIAL"
    GAP = "GAP"

    @property
    def rank(self) -> int:
        """Integer rank, higher is better."""
        return _STATUS_RANK[self]

    @classmethod
    def best(cls, statuses: Iterable[CoverageStatus]) -> CoverageStatus:
        """Return the best status in ``statuses`` (GAP when empty)."""
        best = cls.GAP
        for status in statuses:
            if status.rank > best.rank:
                best = status
        return best

    @classmethod
    def worst(cls, statuses: Iterable[CoverageStatus]) -> CoverageStatus:
        """Return the worst status in ``statuses`` (GAP when empty)."""
        ranked = list(statuses)
        if not ranked:
            return cls.GAP
        return min(ranked, key=lambda s: s.rank)


_STATUS_RANK = {
    CoverageStatus.COVERED: 2,
    CoverageStatus.PARTIAL: 1,
    CoverageStatus.GAP: 0,
}


class MappingType(str, Enum):
    """Strength of a cross-reference between two clauses.

    EQUIVALENT: Same requirement, merged into one equivalence class.
    RELATED: Thematically linked, used for cascades and suggestions.
    SUPPORTING: Weak linkage, informational only.
    """

    EQUIVALENT = "EQUIVALENT"
    RELATED = "RELATED"
    SUPPORTING = "SUPPORTING"

    @property
    def sort_order(self) -> int:
        """Display order: EQUIVALENT first, SUPPORTING last."""
        return _MAPPING_ORDER[self]


_MAPPING_ORDER = {
    MappingType.EQUIVALENT: 0,
    MappingType.RELATED: 1,
    MappingType.SUPPORTING: 2,
}


# =============================================================================
# Input Models
# =============================================================================


class StandardClause(BaseModel):
    """A compliance requirement owned by the external clause catalog.

    Attributes:
        clause_id: Stable clause identifier.
        clause_number: Dotted hierarchical number (e.g. "4.2").
        title: Human-readable clause title.
        standard_code: Owning standard's code (e.g. "ISO9001").
        standard_name: Owning standard's display name.
    """

    clause_id: str = Field(..., description="Stable clause identifier")
    clause_number: str = Field(..., description="Dotted clause number")
    title: str = Field(default="", description="Clause title")
    standard_code: str = Field(..., description="Owning standard code")
    standard_name: str = Field(default="", description="Owning standard name")

    model_config = {**_INPUT_MODEL_CONFIG, "frozen": True}

    @field_validator("clause_id")
    @classmethod
    def validate_clause_id(cls, v: str) -> str:
        """Validate clause_id is non-empty."""
        if not v or not v.strip():
            raise ValueError("clause_id must be non-empty")
        return v


class ClauseCoverage(BaseModel):
    """A leaf clause of the coverage tree with its coverage status."""

    clause_id: str = Field(..., description="Leaf clause identifier")
    clause_number: str = Field(..., description="Dotted clause number")
    title: str = Field(default="", description="Clause title")
    status: CoverageStatus = Field(
        default=CoverageStatus.GAP,
        validation_alias=AliasChoices("status", "coverageStatus", "coverage_status"),
        description="Coverage status",
    )

    model_config = _INPUT_MODEL_CONFIG


class TopLevelClause(BaseModel):
    """A top-level (HLS) clause grouping leaf clauses of one standard."""

    clause_id: str = Field(default="", description="Top-level clause identifier")
    clause_number: str = Field(..., description="Top-level clause number")
    title: str = Field(default="", description="Clause title")
    children: List[ClauseCoverage] = Field(
        default_factory=list, description="Leaf clauses under this clause",
    )

    model_config = _INPUT_MODEL_CONFIG


class StandardCoverage(BaseModel):
    """Coverage summary and clause tree for one active standard.

    Counts and ``coverage_percent`` are derived from the leaf clauses
    when the gap-analysis adapter does not supply them.

    Attributes:
        code: Standard code.
        name: Standard display name.
        coverage_percent: Share of COVERED leaves (0-100).
        total_sub_clauses: Number of leaf clauses.
        covered: Number of COVERED leaves.
        partial: Number of PARTIAL leaves.
        gaps: Number of GAP leaves.
        clauses: Top-level clauses with their children.
    """

    code: str = Field(..., description="Standard code")
    name: str = Field(default="", description="Standard display name")
    coverage_percent: Optional[float] = Field(
        default=None, ge=0.0, le=100.0,
        description="Share of COVERED leaves (0-100)",
    )
    total_sub_clauses: Optional[int] = Field(default=None, ge=0)
    covered: Optional[int] = Field(default=None, ge=0)
    partial: Optional[int] = Field(default=None, ge=0)
    gaps: Optional[int] = Field(default=None, ge=0)
    clauses: List[TopLevelClause] = Field(default_factory=list)

    model_config = _INPUT_MODEL_CONFIG

    def leaf_clauses(self) -> List[ClauseCoverage]:
        """Return every leaf clause in tree order."""
        return [child for top in self.clauses for child in top.children]

    @model_validator(mode="after")
    def fill_derived_counts(self) -> StandardCoverage:
        """Derive missing counts and coverage from the leaf clauses."""
        leaves = self.leaf_clauses()
        if self.total_sub_clauses is None:
            self.total_sub_clauses = len(leaves)
        if self.covered is None:
            self.covered = sum(
                1 for c in leaves if c.status == CoverageStatus.COVERED
            )
        if self.partial is None:
            self.partial = sum(
                1 for c in leaves if c.status == CoverageStatus.PARTIAL
            )
        if self.gaps is None:
            self.gaps = sum(1 for c in leaves if c.status == CoverageStatus.GAP)
        if self.coverage_percent is None:
            self.coverage_percent = (
                round_percent(self.covered / self.total_sub_clauses * 100)
                if self.total_sub_clauses else 0
            )
        return self


class CoverageTree(BaseModel):
    """Gap-analysis output for an organization's active standards."""

    standards: List[StandardCoverage] = Field(default_factory=list)
    overall_coverage_percent: Optional[float] = Field(
        default=None, ge=0.0, le=100.0,
        description="Naive COVERED share across all leaves (0-100)",
    )

    model_config = _INPUT_MODEL_CONFIG

    @model_validator(mode="after")
    def fill_overall_coverage(self) -> CoverageTree:
        """Derive the overall coverage when the adapter omits it."""
        if self.overall_coverage_percent is None:
            total = sum(s.total_sub_clauses or 0 for s in self.standards)
            covered = sum(s.covered or 0 for s in self.standards)
            self.overall_coverage_percent = (
                round_percent(covered / total * 100) if total else 0
            )
        return self


class ClauseCrossReference(BaseModel):
    """Declared relationship between two clauses, treated as undirected.

    Catalogs that join clause details may supply ``source_clause`` and
    ``target_clause``; the engine uses them to resolve clauses that are
    not part of the organization's coverage tree.
    """

    source_clause_id: str = Field(..., description="Source clause identifier")
    target_clause_id: str = Field(..., description="Target clause identifier")
    mapping_type: MappingType = Field(..., description="Relationship strength")
    source_clause: Optional[StandardClause] = Field(default=None)
    target_clause: Optional[StandardClause] = Field(default=None)
    notes: str = Field(default="", description="Curator notes")

    model_config = _INPUT_MODEL_CONFIG


class DocumentClassification(BaseModel):
    """An existing classification of a document against a clause."""

    standard_clause_id: str = Field(..., description="Classified clause")
    confidence: float = Field(
        default=1.0, ge=0.0, le=1.0,
        description="Classification confidence (0.0 to 1.0)",
    )
    clause: Optional[StandardClause] = Field(
        default=None, description="Classified clause details",
    )

    model_config = _INPUT_MODEL_CONFIG


# =============================================================================
# Result Models
# =============================================================================


class EquivalenceSaving(BaseModel):
    """A cross-standard equivalence class that removes duplicate work.

    Attributes:
        hls_group: HLS group number taken from the clause number ("4.2" -> "4").
        raw_count: Number of raw clauses in the equivalence class.
        standards: Sorted distinct standard codes in the class.
    """

    hls_group: str
    raw_count: int = Field(..., ge=2)
    standards: List[str]

    model_config = _MODEL_CONFIG


class IntegrationScore(BaseModel):
    """How much duplication the equivalence classes remove."""

    total_clauses: int = Field(default=0, ge=0)
    unique_requirements: int = Field(default=0, ge=0)
    efficiency_percent: int = Field(default=0, ge=0, le=100)
    savings: List[EquivalenceSaving] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class StandardBreakdown(BaseModel):
    """Per-standard coverage passed through from the gap analysis."""

    standard_code: str
    standard_name: str = ""
    raw_coverage: float = Field(default=0.0, ge=0.0, le=100.0)
    deduplicated_coverage: float = Field(default=0.0, ge=0.0, le=100.0)
    total_clauses: int = Field(default=0, ge=0)
    covered: int = Field(default=0, ge=0)
    partial: int = Field(default=0, ge=0)
    gaps: int = Field(default=0, ge=0)

    model_config = _MODEL_CONFIG


class ConsolidatedReadiness(BaseModel):
    """Readiness recomputed over deduplicated equivalence classes.

    Attributes:
        weighted_score: COVERED=1, PARTIAL=0.5, GAP=0 over classes (0-100).
        deduplicated_coverage: COVERED classes over all classes (0-100).
        raw_coverage: Naive coverage across all clauses, not deduplicated.
        total_classes: Number of equivalence classes.
        deduplicated_covered: Classes whose best status is COVERED.
        deduplicated_partial: Classes whose best status is PARTIAL.
        deduplicated_gap: Classes whose best status is GAP.
        standards: Per-standard breakdown.
    """

    weighted_score: int = Field(default=0, ge=0, le=100)
    deduplicated_coverage: int = Field(default=0, ge=0, le=100)
    raw_coverage: float = Field(default=0.0, ge=0.0, le=100.0)
    total_classes: int = Field(default=0, ge=0)
    deduplicated_covered: int = Field(default=0, ge=0)
    deduplicated_partial: int = Field(default=0, ge=0)
    deduplicated_gap: int = Field(default=0, ge=0)
    standards: List[StandardBreakdown] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class MatrixCell(BaseModel):
    """Aggregate status of one standard's top-level clause in an HLS row."""

    standard_code: str
    status: CoverageStatus
    clause_id: str = ""
    clause_number: str
    title: str = ""

    model_config = _MODEL_CONFIG


class SharedRequirementsRow(BaseModel):
    """One HLS group compared side by side across standards."""

    hls_group: str
    hls_title: str
    cells: List[MatrixCell] = Field(default_factory=list)
    has_inconsistency: bool = False

    model_config = _MODEL_CONFIG


class CascadeTarget(BaseModel):
    """A clause in another standard put at risk by a deficiency."""

    clause_id: str
    clause_number: str
    title: str = ""
    standard_code: str
    standard_name: str = ""
    status: CoverageStatus
    mapping_type: MappingType

    model_config = _MODEL_CONFIG


class GapCascade(BaseModel):
    """A non-covered clause and the cross-standard clauses it threatens.

    Attributes:
        source_clause_id: The PARTIAL or GAP clause.
        targets: Affected clauses, EQUIVALENT first then by standard code.
        impact_count: Distinct standards touched, source included.
    """

    source_clause_id: str
    source_clause_number: str
    source_title: str = ""
    source_standard_code: str
    source_standard_name: str = ""
    source_status: CoverageStatus
    targets: List[CascadeTarget] = Field(default_factory=list)
    impact_count: int = Field(default=1, ge=1)

    model_config = _MODEL_CONFIG


class CrossStandardSummary(BaseModel):
    """Aggregate result returned to the presentation layer."""

    active_standard_count: int = Field(default=0, ge=0)
    integration_score: IntegrationScore = Field(default_factory=IntegrationScore)
    consolidated_readiness: ConsolidatedReadiness = Field(
        default_factory=ConsolidatedReadiness,
    )
    shared_requirements: List[SharedRequirementsRow] = Field(default_factory=list)
    gap_cascades: List[GapCascade] = Field(default_factory=list)
    provenance_hash: str = Field(
        default="", description="SHA-256 provenance hash for audit trail",
    )

    model_config = _MODEL_CONFIG


class DocumentSuggestion(BaseModel):
    """An advisory extra classification for a document."""

    source_clause_id: str
    source_clause_number: str
    source_standard_code: str
    source_confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    suggested_clause_id: str
    suggested_clause_number: str
    suggested_clause_title: str = ""
    suggested_standard_code: str
    suggested_standard_name: str = ""
    already_classified: bool = False

    model_config = _MODEL_CONFIG


class EquivalentGap(BaseModel):
    """A clause linked to a given clause, with its current coverage."""

    clause_id: str
    clause_number: str
    title: str = ""
    standard_code: str
    standard_name: str = ""
    status: CoverageStatus
    mapping_type: MappingType

    model_config = _MODEL_CONFIG


# =============================================================================
# Catalog Models
# =============================================================================


class CrossReferenceSpec(BaseModel):
    """A cross-reference keyed by standard code and clause number.

    Catalog curation describes edges this way before clause identifiers
    are known; ``catalog.resolve_cross_references`` turns them into
    ClauseCrossReference edges.
    """

    source_standard: str
    source_clause_number: str
    target_standard: str
    target_clause_number: str
    mapping_type: MappingType = MappingType.EQUIVALENT
    notes: str = ""

    model_config = {**_MODEL_CONFIG, "frozen": True}


__all__ = [
    "HLS_GROUPS",
    "round_percent",
    "CoverageStatus",
    "MappingType",
    "StandardClause",
    "ClauseCoverage",
    "TopLevelClause",
    "StandardCoverage",
    "CoverageTree",
    "ClauseCrossReference",
    "DocumentClassification",
    "EquivalenceSaving",
    "IntegrationScore",
    "StandardBreakdown",
    "ConsolidatedReadiness",
    "MatrixCell",
    "SharedRequirementsRow",
    "CascadeTarget",
    "GapCascade",
    "CrossStandardSummary",
    "DocumentSuggestion",
    "EquivalentGap",
    "CrossReferenceSpec",
]
