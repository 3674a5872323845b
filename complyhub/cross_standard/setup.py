# -*- coding: utf-8 -*-
"""
Cross-Standard Integration Service Setup

Provides the ``CrossStandardService`` facade, which fetches inputs from
the host's upstream sources, runs the integration engines, and records
provenance, metrics and operational statistics.

Also exposes ``configure_cross_standard(app, ...)`` to attach a service
to an application's ``state`` and ``get_cross_standard_service(app)``
for programmatic access.

Usage:
    >>> from complyhub.cross_standard.setup import CrossStandardService
    >>> service = CrossStandardService(
    ...     coverage_source=gap_analysis,
    ...     cross_reference_source=catalog,
    ...     classification_source=documents,
    ... )
    >>> summary = await service.compute_summary("org-1")
    >>> print(summary.consolidated_readiness.weighted_score)
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from complyhub.cross_standard.clause_index import (
    ClauseDirectory,
    CrossReferenceGraph,
)
from complyhub.cross_standard.config import CrossStandardConfig, get_config
from complyhub.cross_standard.document_suggestions import DocumentSuggestionEngine
from complyhub.cross_standard.integration_pipeline import (
    CrossStandardIntegrationPipeline,
)
from complyhub.cross_standard.metrics import (
    dec_active_computations,
    inc_active_computations,
    inc_equivalence_classes,
    inc_errors,
    inc_gap_cascades,
    inc_suggestions,
    inc_summaries,
    observe_duration,
)
from complyhub.cross_standard.models import (
    ClauseCrossReference,
    CoverageTree,
    CrossStandardSummary,
    DocumentClassification,
    DocumentSuggestion,
    EquivalentGap,
)
from complyhub.cross_standard.provenance import ProvenanceTracker, compute_hash
from complyhub.cross_standard.sources import (
    ClassificationSource,
    CoverageTreeSource,
    CrossReferenceSource,
    resolve,
    to_classifications,
    to_coverage_tree,
    to_cross_references,
)
from complyhub.exceptions import (
    ComplyHubException,
    ConfigurationError,
    DataAccessError,
    InvalidSchema,
)

logger = logging.getLogger(__name__)

_PACKAGE_LOGGER = "complyhub.cross_standard"


# ===================================================================
# Statistics model
# ===================================================================


class CrossStandardStatistics(BaseModel):
    """Aggregated operational statistics for the service."""

    total_invocations: int = Field(default=0)
    successful_invocations: int = Field(default=0)
    failed_invocations: int = Field(default=0)
    summaries_computed: int = Field(default=0)
    suggestion_requests: int = Field(default=0)
    equivalent_gap_lookups: int = Field(default=0)
    total_duration_ms: float = Field(default=0.0)
    avg_duration_ms: float = Field(default=0.0)
    last_operation: Optional[str] = Field(default=None)
    last_invocation_at: Optional[datetime] = Field(default=None)
    active_computations: int = Field(default=0)
    provenance_entries: int = Field(default=0)


_OPERATION_COUNTERS = {
    "summary": "summaries_computed",
    "suggestions": "suggestion_requests",
    "equivalent_gaps": "equivalent_gap_lookups",
}


def _error_type(exc: BaseException) -> str:
    """Classify an exception for the error metric."""
    if isinstance(exc, DataAccessError):
        if exc.context.get("cause_type") == "TimeoutError":
            return "timeout"
        return "data_access"
    if isinstance(exc, InvalidSchema):
        return "validation"
    return "unknown"


# ===================================================================
# CrossStandardService facade
# ===================================================================


class CrossStandardService:
    """Unified facade over the Cross-Standard Integration Engine.

    Upstream reads are issued concurrently; the engine computation is
    synchronous and in memory. Each call builds its own equivalence
    classes, so one service instance can serve concurrent callers.

    Attributes:
        config: CrossStandardConfig instance.
        pipeline: CrossStandardIntegrationPipeline for summaries.
        suggestion_engine: DocumentSuggestionEngine for per-document calls.
        provenance: ProvenanceTracker for SHA-256 audit trails.
    """

    def __init__(
        self,
        coverage_source: CoverageTreeSource,
        cross_reference_source: CrossReferenceSource,
        classification_source: Optional[ClassificationSource] = None,
        config: Optional[CrossStandardConfig] = None,
    ) -> None:
        """Initialize the service.

        Args:
            coverage_source: Gap-analysis capability.
            cross_reference_source: Cross-reference catalog capability.
            classification_source: Document classification capability,
                required only for ``get_document_suggestions``.
            config: Optional configuration. Uses global config if None.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self.config = config or get_config()
        self.config.validate()
        logging.getLogger(_PACKAGE_LOGGER).setLevel(
            getattr(logging, self.config.log_level.upper(), logging.INFO)
        )

        self._coverage_source = coverage_source
        self._cross_reference_source = cross_reference_source
        self._classification_source = classification_source

        self.pipeline = CrossStandardIntegrationPipeline(
            partial_credit_weight=self.config.partial_credit_weight,
        )
        self.suggestion_engine = DocumentSuggestionEngine()
        self.provenance = ProvenanceTracker(
            max_entries=self.config.max_provenance_entries,
        )

        self._stats_lock = threading.Lock()
        self._stats = CrossStandardStatistics()
        self._started = False

        logger.info("CrossStandardService facade created")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def compute_summary(
        self,
        org_id: str,
        project_id: Optional[str] = None,
        standard_code: Optional[str] = None,
    ) -> CrossStandardSummary:
        """Compute the cross-standard summary for an organization.

        Args:
            org_id: Organization identifier.
            project_id: Optional project scope passed to gap analysis.
            standard_code: Optional standard scope passed to gap analysis.

        Returns:
            CrossStandardSummary with provenance hash.

        Raises:
            DataAccessError: If an upstream read fails or times out.
            InvalidSchema: If an upstream payload does not validate or
                exceeds the configured size limits.
        """
        start_time = time.monotonic()
        self._begin("summary")
        try:
            tree, refs = await asyncio.gather(
                self._load_tree(org_id, project_id, standard_code),
                self._load_cross_references(),
            )
            summary = self.pipeline.run(tree, refs)
        except Exception as exc:
            self._record_failure("summary", exc, start_time)
            inc_summaries("failure")
            raise
        finally:
            self._end()

        summary.provenance_hash = compute_hash(summary)
        self._record_provenance(
            "summary", org_id, "compute", summary.provenance_hash,
        )

        inc_summaries("success")
        inc_equivalence_classes(len(summary.integration_score.savings))
        for cascade in summary.gap_cascades:
            for target in cascade.targets:
                inc_gap_cascades(target.mapping_type.value)
        self._record_success("summary", start_time)

        logger.info(
            "Summary for org %s: %d standards, efficiency=%d%%, "
            "weighted=%d%%, cascades=%d",
            org_id, summary.active_standard_count,
            summary.integration_score.efficiency_percent,
            summary.consolidated_readiness.weighted_score,
            len(summary.gap_cascades),
        )
        return summary

    async def get_document_suggestions(
        self,
        document_id: str,
        org_id: Optional[str] = None,
    ) -> List[DocumentSuggestion]:
        """Suggest cross-standard classifications for a document.

        Clause identities come from the document's classifications, the
        cross-reference endpoint details and, when ``org_id`` is given,
        the organization's coverage tree. Sources that return bare clause
        ids need ``org_id`` for any suggestion to resolve.

        Args:
            document_id: Document identifier.
            org_id: Organization owning the document.

        Returns:
            DocumentSuggestion list, unclassified first.

        Raises:
            ConfigurationError: If no classification source was supplied.
            DataAccessError: If an upstream read fails or times out.
            InvalidSchema: If an upstream payload does not validate.
        """
        if self._classification_source is None:
            raise ConfigurationError(
                message="Document suggestions require a classification source",
                engine_name="CrossStandardService",
            )

        start_time = time.monotonic()
        self._begin("suggestions")
        try:
            reads = [
                self._load_classifications(document_id),
                self._load_cross_references(),
            ]
            if org_id is not None:
                reads.append(self._load_tree(org_id, None, None))
            classifications, refs, *tree = await asyncio.gather(*reads)

            directory = (
                ClauseDirectory.from_coverage_tree(tree[0])
                if tree else ClauseDirectory()
            )
            directory.register_classifications(classifications)
            directory.register_cross_references(refs)
            graph = CrossReferenceGraph.from_cross_references(refs)
            suggestions = self.suggestion_engine.suggest(
                classifications, graph, directory,
            )
        except Exception as exc:
            self._record_failure("suggestions", exc, start_time)
            raise
        finally:
            self._end()

        data_hash = compute_hash([s.model_dump(mode="json") for s in suggestions])
        self._record_provenance(
            "document_suggestions", document_id, "suggest", data_hash,
        )

        new_count = sum(1 for s in suggestions if not s.already_classified)
        inc_suggestions(False, new_count)
        inc_suggestions(True, len(suggestions) - new_count)
        self._record_success("suggestions", start_time)
        return suggestions

    async def get_equivalent_gaps_for_clause(
        self,
        clause_id: str,
        org_id: str,
    ) -> List[EquivalentGap]:
        """List clauses linked to ``clause_id`` with the org's coverage.

        Args:
            clause_id: Clause a finding was raised against.
            org_id: Organization whose coverage is looked up.

        Returns:
            EquivalentGap list, EQUIVALENT first, then by standard code.

        Raises:
            DataAccessError: If an upstream read fails or times out.
            InvalidSchema: If an upstream payload does not validate.
        """
        start_time = time.monotonic()
        self._begin("equivalent_gaps")
        try:
            tree, refs = await asyncio.gather(
                self._load_tree(org_id, None, None),
                self._load_cross_references(),
            )
            directory = ClauseDirectory.from_coverage_tree(tree)
            directory.register_cross_references(refs)
            graph = CrossReferenceGraph.from_cross_references(refs)
            gaps = self.suggestion_engine.equivalent_gaps(
                clause_id, graph, directory,
            )
        except Exception as exc:
            self._record_failure("equivalent_gaps", exc, start_time)
            raise
        finally:
            self._end()

        data_hash = compute_hash([g.model_dump(mode="json") for g in gaps])
        self._record_provenance("equivalent_gaps", clause_id, "lookup", data_hash)
        self._record_success("equivalent_gaps", start_time)
        logger.info(
            "Clause %s links to %d clauses in other standards",
            clause_id, len(gaps),
        )
        return gaps

    # ------------------------------------------------------------------
    # Upstream reads
    # ------------------------------------------------------------------

    async def _load_tree(
        self,
        org_id: str,
        project_id: Optional[str],
        standard_code: Optional[str],
    ) -> CoverageTree:
        raw = await self._fetch(
            "coverage_tree",
            lambda: self._coverage_source.get_coverage_tree(
                org_id, standard_code=standard_code, project_id=project_id,
            ),
        )
        tree = to_coverage_tree(raw)
        leaf_count = sum(s.total_sub_clauses or 0 for s in tree.standards)
        if leaf_count > self.config.max_clauses:
            raise InvalidSchema(
                message=(
                    f"Coverage tree has {leaf_count} clauses, "
                    f"limit is {self.config.max_clauses}"
                ),
                data_source="coverage_tree",
            )
        return tree

    async def _load_cross_references(self) -> List[ClauseCrossReference]:
        raw = await self._fetch(
            "cross_references",
            self._cross_reference_source.get_cross_references,
        )
        refs = to_cross_references(raw)
        if len(refs) > self.config.max_cross_references:
            raise InvalidSchema(
                message=(
                    f"Received {len(refs)} cross-references, "
                    f"limit is {self.config.max_cross_references}"
                ),
                data_source="cross_references",
            )
        return refs

    async def _load_classifications(
        self,
        document_id: str,
    ) -> List[DocumentClassification]:
        raw = await self._fetch(
            "document_classifications",
            lambda: self._classification_source.get_document_classifications(
                document_id,
            ),
        )
        return to_classifications(raw)

    async def _fetch(self, data_source: str, call: Callable[[], Any]) -> Any:
        """Invoke an upstream source, wrapping failures in DataAccessError."""
        timeout = self.config.fetch_timeout_seconds
        try:
            pending = resolve(call())
            if timeout > 0:
                return await asyncio.wait_for(pending, timeout)
            return await pending
        except asyncio.TimeoutError as exc:
            raise DataAccessError(
                message=f"Timed out after {timeout:.1f}s reading {data_source}",
                data_source=data_source,
                operation="read",
                cause=TimeoutError(str(exc) or "timed out"),
            ) from exc
        except ComplyHubException:
            raise
        except Exception as exc:
            raise DataAccessError(
                message=f"Failed to read {data_source}",
                data_source=data_source,
                operation="read",
                cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Statistics and health
    # ------------------------------------------------------------------

    def _begin(self, operation: str) -> None:
        with self._stats_lock:
            self._stats.total_invocations += 1
            self._stats.active_computations += 1
            self._stats.last_operation = operation
            self._stats.last_invocation_at = datetime.now(timezone.utc)
        inc_active_computations()

    def _end(self) -> None:
        with self._stats_lock:
            self._stats.active_computations -= 1
        dec_active_computations()

    def _record_success(self, operation: str, start_time: float) -> None:
        elapsed = time.monotonic() - start_time
        with self._stats_lock:
            self._stats.successful_invocations += 1
            counter = _OPERATION_COUNTERS[operation]
            setattr(self._stats, counter, getattr(self._stats, counter) + 1)
            self._stats.total_duration_ms += elapsed * 1000.0
        observe_duration(operation, elapsed)

    def _record_failure(
        self,
        operation: str,
        exc: BaseException,
        start_time: float,
    ) -> None:
        elapsed = time.monotonic() - start_time
        with self._stats_lock:
            self._stats.failed_invocations += 1
            self._stats.total_duration_ms += elapsed * 1000.0
        inc_errors(_error_type(exc))
        observe_duration(operation, elapsed)
        logger.error(
            "Cross-standard %s failed after %.1fms: %s",
            operation, elapsed * 1000.0, exc,
        )

    def _record_provenance(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
        data_hash: str,
    ) -> None:
        if self.config.enable_provenance:
            self.provenance.record(
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
                data_hash=data_hash,
            )

    def get_statistics(self) -> CrossStandardStatistics:
        """Get a snapshot of operational statistics.

        Returns:
            CrossStandardStatistics copy.
        """
        with self._stats_lock:
            snapshot = self._stats.model_copy()
        finished = snapshot.successful_invocations + snapshot.failed_invocations
        snapshot.avg_duration_ms = round(
            snapshot.total_duration_ms / max(finished, 1), 3,
        )
        snapshot.provenance_entries = self.provenance.entry_count
        return snapshot

    def health_check(self) -> Dict[str, Any]:
        """Perform a health check on the service.

        Returns:
            Health status dict.
        """
        stats = self.get_statistics()
        return {
            "status": "healthy" if self._started else "not_started",
            "service": "cross-standard-integration",
            "started": self._started,
            "classification_source": self._classification_source is not None,
            "total_invocations": stats.total_invocations,
            "failed_invocations": stats.failed_invocations,
            "active_computations": stats.active_computations,
            "provenance_entries": stats.provenance_entries,
            "provenance_chain_valid": self.provenance.verify_chain(),
            "metrics_enabled": self.config.enable_metrics,
        }

    def get_provenance(self) -> ProvenanceTracker:
        """Get the ProvenanceTracker instance."""
        return self.provenance


# ===================================================================
# Module-level configuration functions
# ===================================================================


async def configure_cross_standard(
    app: Any,
    coverage_source: CoverageTreeSource,
    cross_reference_source: CrossReferenceSource,
    classification_source: Optional[ClassificationSource] = None,
    config: Optional[CrossStandardConfig] = None,
) -> CrossStandardService:
    """Configure the Cross-Standard Service on an application.

    Creates the CrossStandardService, stores it in ``app.state`` and
    marks it started.

    Args:
        app: Application instance exposing a ``state`` namespace.
        coverage_source: Gap-analysis capability.
        cross_reference_source: Cross-reference catalog capability.
        classification_source: Optional document classification capability.
        config: Optional cross-standard config.

    Returns:
        CrossStandardService instance.
    """
    service = CrossStandardService(
        coverage_source=coverage_source,
        cross_reference_source=cross_reference_source,
        classification_source=classification_source,
        config=config,
    )
    app.state.cross_standard_service = service
    service._started = True
    logger.info("Cross-standard service configured and started")
    return service


def get_cross_standard_service(app: Any) -> CrossStandardService:
    """Get the CrossStandardService instance from app state.

    Args:
        app: Application instance.

    Returns:
        CrossStandardService instance.

    Raises:
        RuntimeError: If the cross-standard service is not configured.
    """
    service = getattr(app.state, "cross_standard_service", None)
    if service is None:
        raise RuntimeError(
            "Cross-standard service not configured. "
            "Call configure_cross_standard(app, ...) first."
        )
    return service


__all__ = [
    "CrossStandardService",
    "CrossStandardStatistics",
    "configure_cross_standard",
    "get_cross_standard_service",
]
