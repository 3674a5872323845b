# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Cross-Standard Integration Engine

7 Prometheus metrics for cross-standard integration monitoring. Helpers
are no-ops while ``CH_XS_ENABLE_METRICS`` is false.

Metrics:
    1. ch_xs_summaries_computed_total (Counter, labels: status)
    2. ch_xs_equivalence_classes_formed_total (Counter)
    3. ch_xs_gap_cascades_detected_total (Counter, labels: mapping_type)
    4. ch_xs_suggestions_generated_total (Counter, labels: already_classified)
    5. ch_xs_processing_duration_seconds (Histogram, labels: operation)
    6. ch_xs_active_computations (Gauge)
    7. ch_xs_processing_errors_total (Counter, labels: error_type)
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

from complyhub.cross_standard.config import get_config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Summary computations by outcome
xs_summaries_computed_total = Counter(
    "ch_xs_summaries_computed_total",
    "Total cross-standard summaries computed",
    labelnames=["status"],
)

# 2. Equivalence classes spanning two or more standards
xs_equivalence_classes_formed_total = Counter(
    "ch_xs_equivalence_classes_formed_total",
    "Total cross-standard equivalence classes formed",
)

# 3. Cascade targets by mapping type
xs_gap_cascades_detected_total = Counter(
    "ch_xs_gap_cascades_detected_total",
    "Total gap cascade targets detected",
    labelnames=["mapping_type"],
)

# 4. Document suggestions by classification state
xs_suggestions_generated_total = Counter(
    "ch_xs_suggestions_generated_total",
    "Total document classification suggestions generated",
    labelnames=["already_classified"],
)

# 5. Processing duration by operation
xs_processing_duration_seconds = Histogram(
    "ch_xs_processing_duration_seconds",
    "Cross-standard processing duration in seconds",
    labelnames=["operation"],
    buckets=(
        0.005, 0.01, 0.025, 0.05, 0.1, 0.25,
        0.5, 1.0, 2.5, 5.0, 10.0, 30.0,
    ),
)

# 6. In-flight computations
xs_active_computations = Gauge(
    "ch_xs_active_computations",
    "Number of cross-standard computations in progress",
)

# 7. Processing errors by error type
xs_processing_errors_total = Counter(
    "ch_xs_processing_errors_total",
    "Total cross-standard processing errors",
    labelnames=["error_type"],
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _enabled() -> bool:
    return get_config().enable_metrics


def inc_summaries(status: str) -> None:
    """Record a summary computation.

    Args:
        status: Outcome (success, failure).
    """
    if not _enabled():
        return
    xs_summaries_computed_total.labels(status=status).inc()


def inc_equivalence_classes(count: int = 1) -> None:
    """Record cross-standard equivalence classes formed."""
    if not _enabled() or count <= 0:
        return
    xs_equivalence_classes_formed_total.inc(count)


def inc_gap_cascades(mapping_type: str, count: int = 1) -> None:
    """Record gap cascade targets detected.

    Args:
        mapping_type: EQUIVALENT, RELATED or SUPPORTING.
        count: Number of targets.
    """
    if not _enabled() or count <= 0:
        return
    xs_gap_cascades_detected_total.labels(mapping_type=mapping_type).inc(count)


def inc_suggestions(already_classified: bool, count: int = 1) -> None:
    """Record document suggestions generated."""
    if not _enabled() or count <= 0:
        return
    xs_suggestions_generated_total.labels(
        already_classified=str(already_classified).lower(),
    ).inc(count)


def observe_duration(operation: str, duration: float) -> None:
    """Record processing duration for an operation.

    Args:
        operation: Operation type (summary, suggestions, equivalent_gaps).
        duration: Duration in seconds.
    """
    if not _enabled():
        return
    xs_processing_duration_seconds.labels(operation=operation).observe(duration)


def inc_active_computations() -> None:
    if not _enabled():
        return
    xs_active_computations.inc()


def dec_active_computations() -> None:
    if not _enabled():
        return
    xs_active_computations.dec()


def inc_errors(error_type: str) -> None:
    """Record a processing error.

    Args:
        error_type: Error classification (data_access, validation,
            timeout, unknown).
    """
    if not _enabled():
        return
    xs_processing_errors_total.labels(error_type=error_type).inc()


__all__ = [
    # Metric objects
    "xs_summaries_computed_total",
    "xs_equivalence_classes_formed_total",
    "xs_gap_cascades_detected_total",
    "xs_suggestions_generated_total",
    "xs_processing_duration_seconds",
    "xs_active_computations",
    "xs_processing_errors_total",
    # Helper functions
    "inc_summaries",
    "inc_equivalence_classes",
    "inc_gap_cascades",
    "inc_suggestions",
    "observe_duration",
    "inc_active_computations",
    "dec_active_computations",
    "inc_errors",
]
