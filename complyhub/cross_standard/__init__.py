# -*- coding: utf-8 -*-
"""
ComplyHub Cross-Standard Integration Engine
===========================================

Reconciles compliance coverage computed independently per standard into
one deduplicated picture for organizations certified against several
overlapping ISO management system standards. It supports:

- Equivalence classes of clauses joined by EQUIVALENT cross-references
  (union-find with path compression and union by rank)
- Integration score: duplicate work removed by cross-standard classes
- Consolidated readiness on the deduplicated requirement set
- Shared requirements matrix over the HLS (Annex SL) groups 4 to 10
- Gap cascades: deficiencies that put clauses of other standards at risk
- Document classification suggestions and equivalent-gap lookups
- HLS cross-reference catalog generation
- SHA-256 provenance chain tracking
- 7 Prometheus metrics for observability
- Thread-safe configuration with CH_XS_ env prefix

Key Components:
    - config: CrossStandardConfig with CH_XS_ env prefix
    - equivalence: EquivalenceClassBuilder (disjoint set)
    - clause_index: ClauseDirectory and CrossReferenceGraph
    - integration_scorer: IntegrationScorer
    - readiness_calculator: ConsolidatedReadinessCalculator
    - shared_requirements: SharedRequirementsMatrixBuilder
    - gap_cascade: GapCascadeDetector
    - document_suggestions: DocumentSuggestionEngine
    - integration_pipeline: CrossStandardIntegrationPipeline
    - catalog: HLS cross-reference catalog helpers
    - sources: upstream source protocols
    - provenance: SHA-256 chain-hashed audit trails
    - metrics: 7 Prometheus metrics
    - setup: CrossStandardService facade

Example:
    >>> from complyhub.cross_standard import CrossStandardIntegrationPipeline
    >>> summary = CrossStandardIntegrationPipeline().run(tree, cross_references)
    >>> summary.integration_score.efficiency_percent
    25
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from complyhub.cross_standard.config import (
    CrossStandardConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from complyhub.cross_standard.models import (
    HLS_GROUPS,
    CoverageStatus,
    MappingType,
    StandardClause,
    ClauseCoverage,
    TopLevelClause,
    StandardCoverage,
    CoverageTree,
    ClauseCrossReference,
    DocumentClassification,
    EquivalenceSaving,
    IntegrationScore,
    StandardBreakdown,
    ConsolidatedReadiness,
    MatrixCell,
    SharedRequirementsRow,
    CascadeTarget,
    GapCascade,
    CrossStandardSummary,
    DocumentSuggestion,
    EquivalentGap,
    CrossReferenceSpec,
)

# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------
from complyhub.cross_standard.equivalence import (
    EquivalenceClassBuilder,
    build_equivalence_classes,
)
from complyhub.cross_standard.clause_index import (
    ClauseDirectory,
    CrossReferenceGraph,
    Neighbor,
)
from complyhub.cross_standard.integration_scorer import IntegrationScorer
from complyhub.cross_standard.readiness_calculator import (
    ConsolidatedReadinessCalculator,
)
from complyhub.cross_standard.shared_requirements import (
    SharedRequirementsMatrixBuilder,
    aggregate_status,
)
from complyhub.cross_standard.gap_cascade import GapCascadeDetector
from complyhub.cross_standard.document_suggestions import (
    DocumentSuggestionEngine,
    find_equivalent_gaps,
)
from complyhub.cross_standard.integration_pipeline import (
    CrossStandardIntegrationPipeline,
)
from complyhub.cross_standard.catalog import (
    COMMON_HLS_SUB_CLAUSES,
    DOMAIN_CROSS_REFERENCES,
    HLS_STANDARD_CODES,
    generate_hls_cross_references,
    resolve_cross_references,
)

# ---------------------------------------------------------------------------
# Provenance and service
# ---------------------------------------------------------------------------
from complyhub.cross_standard.provenance import ProvenanceTracker, compute_hash
from complyhub.cross_standard.sources import (
    ClassificationSource,
    CoverageTreeSource,
    CrossReferenceSource,
)
from complyhub.cross_standard.setup import (
    CrossStandardService,
    CrossStandardStatistics,
    configure_cross_standard,
    get_cross_standard_service,
)

__all__ = [
    "__version__",
    # Configuration
    "CrossStandardConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Models
    "HLS_GROUPS",
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
    # Engines
    "EquivalenceClassBuilder",
    "build_equivalence_classes",
    "ClauseDirectory",
    "CrossReferenceGraph",
    "Neighbor",
    "IntegrationScorer",
    "ConsolidatedReadinessCalculator",
    "SharedRequirementsMatrixBuilder",
    "aggregate_status",
    "GapCascadeDetector",
    "DocumentSuggestionEngine",
    "find_equivalent_gaps",
    "CrossStandardIntegrationPipeline",
    # Catalog
    "COMMON_HLS_SUB_CLAUSES",
    "DOMAIN_CROSS_REFERENCES",
    "HLS_STANDARD_CODES",
    "generate_hls_cross_references",
    "resolve_cross_references",
    # Provenance and service
    "ProvenanceTracker",
    "compute_hash",
    "ClassificationSource",
    "CoverageTreeSource",
    "CrossReferenceSource",
    "CrossStandardService",
    "CrossStandardStatistics",
    "configure_cross_standard",
    "get_cross_standard_service",
]
