# -*- coding: utf-8 -*-
"""
Cross-Standard Integration Engine Configuration

Centralized configuration for the Cross-Standard Integration Engine
covering:
- Upstream fetch behaviour (timeout for coverage tree / cross-reference reads)
- Input size guards (max clauses, max cross-references per invocation)
- Readiness scoring (partial credit weight)
- Provenance, logging, and metrics settings

All settings can be overridden via environment variables with the
``CH_XS_`` prefix (e.g. ``CH_XS_FETCH_TIMEOUT_SECONDS``).

Example:
    >>> from complyhub.cross_standard.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.fetch_timeout_seconds, cfg.enable_metrics)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

from complyhub.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "CH_XS_"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# CrossStandardConfig
# ---------------------------------------------------------------------------


@dataclass
class CrossStandardConfig:
    """Complete configuration for the Cross-Standard Integration Engine.

    All attributes can be overridden via environment variables using the
    ``CH_XS_`` prefix.

    Attributes:
        fetch_timeout_seconds: Timeout applied to each upstream read
            (coverage tree, cross-references, classifications). Values
            of zero or below disable the timeout.
        max_clauses: Maximum number of leaf clauses accepted in a single
            coverage tree.
        max_cross_references: Maximum number of cross-reference edges
            accepted in a single invocation.
        partial_credit_weight: Credit given to an equivalence class whose
            best status is PARTIAL in the weighted readiness score.
        enable_provenance: Whether SHA-256 provenance entries are recorded
            for computed summaries and suggestions.
        max_provenance_entries: Number of most recent provenance entries
            kept in memory per service instance.
        log_level: Logging level for the cross-standard engine.
        enable_metrics: Whether Prometheus metrics collection is enabled.
    """

    # -- Upstream fetches ----------------------------------------------------
    fetch_timeout_seconds: float = 30.0

    # -- Input guards --------------------------------------------------------
    max_clauses: int = 20_000
    max_cross_references: int = 200_000

    # -- Scoring -------------------------------------------------------------
    partial_credit_weight: float = 0.5

    # -- Provenance ----------------------------------------------------------
    enable_provenance: bool = True
    max_provenance_entries: int = 10_000

    # -- Logging -------------------------------------------------------------
    log_level: str = "INFO"

    # -- Metrics -------------------------------------------------------------
    enable_metrics: bool = True

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        errors = {}
        if not 0.0 <= self.partial_credit_weight <= 1.0:
            errors["partial_credit_weight"] = "must be within [0, 1]"
        if self.max_clauses <= 0:
            errors["max_clauses"] = "must be positive"
        if self.max_cross_references <= 0:
            errors["max_cross_references"] = "must be positive"
        if self.max_provenance_entries <= 0:
            errors["max_provenance_entries"] = "must be positive"
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            errors["log_level"] = f"must be one of {', '.join(_VALID_LOG_LEVELS)}"

        if errors:
            raise ConfigurationError(
                message="Invalid cross-standard configuration",
                engine_name="CrossStandardConfig",
                context={"invalid_fields": errors},
            )

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> CrossStandardConfig:
        """Build a CrossStandardConfig from environment variables.

        Every field can be overridden via ``CH_XS_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).
        Integer values are parsed via ``int()``.
        Float values are parsed via ``float()``.

        Returns:
            Populated CrossStandardConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %f",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            fetch_timeout_seconds=_float(
                "FETCH_TIMEOUT_SECONDS", cls.fetch_timeout_seconds,
            ),
            max_clauses=_int("MAX_CLAUSES", cls.max_clauses),
            max_cross_references=_int(
                "MAX_CROSS_REFERENCES", cls.max_cross_references,
            ),
            partial_credit_weight=_float(
                "PARTIAL_CREDIT_WEIGHT", cls.partial_credit_weight,
            ),
            enable_provenance=_bool(
                "ENABLE_PROVENANCE", cls.enable_provenance,
            ),
            max_provenance_entries=_int(
                "MAX_PROVENANCE_ENTRIES", cls.max_provenance_entries,
            ),
            log_level=_str("LOG_LEVEL", cls.log_level),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
        )

        logger.info(
            "CrossStandardConfig loaded: fetch_timeout=%.1fs, "
            "max_clauses=%d, max_cross_refs=%d, partial_weight=%.2f, "
            "provenance=%s, log_level=%s, metrics=%s",
            config.fetch_timeout_seconds,
            config.max_clauses,
            config.max_cross_references,
            config.partial_credit_weight,
            config.enable_provenance,
            config.log_level,
            config.enable_metrics,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[CrossStandardConfig] = None
_config_lock = threading.Lock()


def get_config() -> CrossStandardConfig:
    """Return the singleton CrossStandardConfig, creating from env if needed.

    Uses double-checked locking for thread safety with minimal
    contention on the hot path.

    Returns:
        CrossStandardConfig singleton instance.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = CrossStandardConfig.from_env()
    return _config_instance


def set_config(config: CrossStandardConfig) -> None:
    """Replace the singleton CrossStandardConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("CrossStandardConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "CrossStandardConfig",
    "get_config",
    "set_config",
    "reset_config",
]
