# -*- coding: utf-8 -*-
"""
Upstream Sources - Cross-Standard Integration Engine

Protocols for the capabilities the hosting application must provide,
and validation of their payloads into the engine's input models.

    CoverageTreeSource.get_coverage_tree(org_id, standard_code, project_id)
    CrossReferenceSource.get_cross_references()
    ClassificationSource.get_document_classifications(document_id)

Implementations may be synchronous or ``async``; results may be model
instances or plain dicts/lists using camelCase or snake_case keys.
Payloads that fail validation raise ``InvalidSchema``.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, List, Optional, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from complyhub.cross_standard.models import (
    ClauseCrossReference,
    CoverageTree,
    DocumentClassification,
)
from complyhub.exceptions import InvalidSchema

logger = logging.getLogger(__name__)

__all__ = [
    "CoverageTreeSource",
    "CrossReferenceSource",
    "ClassificationSource",
    "resolve",
    "to_coverage_tree",
    "to_cross_references",
    "to_classifications",
]


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class CoverageTreeSource(Protocol):
    """Gap-analysis capability: per-clause coverage for active standards."""

    def get_coverage_tree(
        self,
        org_id: str,
        standard_code: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> Any:
        ...


@runtime_checkable
class CrossReferenceSource(Protocol):
    """Catalog capability: the full cross-reference edge list."""

    def get_cross_references(self) -> Any:
        ...


@runtime_checkable
class ClassificationSource(Protocol):
    """Document capability: a document's existing clause classifications."""

    def get_document_classifications(self, document_id: str) -> Any:
        ...


# =============================================================================
# Helpers
# =============================================================================


async def resolve(value: Any) -> Any:
    """Await ``value`` if a source returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


_CROSS_REFERENCES = TypeAdapter(List[ClauseCrossReference])
_CLASSIFICATIONS = TypeAdapter(List[DocumentClassification])


def to_coverage_tree(payload: Any) -> CoverageTree:
    """Validate a gap-analysis payload into a CoverageTree.

    Raises:
        InvalidSchema: If the payload does not validate.
    """
    if isinstance(payload, CoverageTree):
        return payload
    try:
        return CoverageTree.model_validate(payload)
    except ValidationError as exc:
        raise InvalidSchema(
            message="Coverage tree payload failed validation",
            data_source="coverage_tree",
            validation_errors=exc.errors(),
        ) from exc


def to_cross_references(payload: Any) -> List[ClauseCrossReference]:
    """Validate a cross-reference payload into ClauseCrossReference edges.

    Raises:
        InvalidSchema: If the payload does not validate.
    """
    try:
        return _CROSS_REFERENCES.validate_python(list(payload or []))
    except (ValidationError, TypeError) as exc:
        raise InvalidSchema(
            message="Cross-reference payload failed validation",
            data_source="cross_references",
            validation_errors=exc.errors() if isinstance(exc, ValidationError) else None,
        ) from exc


def to_classifications(payload: Any) -> List[DocumentClassification]:
    """Validate a classification payload into DocumentClassification items.

    Raises:
        InvalidSchema: If the payload does not validate.
    """
    try:
        return _CLASSIFICATIONS.validate_python(list(payload or []))
    except (ValidationError, TypeError) as exc:
        raise InvalidSchema(
            message="Document classification payload failed validation",
            data_source="document_classifications",
            validation_errors=exc.errors() if isinstance(exc, ValidationError) else None,
        ) from exc
