"""ComplyHub Custom Exception Hierarchy.

This module provides the exception hierarchy for ComplyHub with rich error
context for debugging, monitoring, and caller feedback.

Exception Hierarchy:
    ComplyHubException (base)
    ├── EngineException
    │   └── ConfigurationError
    └── DataException
        ├── InvalidSchema
        └── DataAccessError

All exceptions include rich context:
- error_code: Unique error identifier
- engine_name: Name of the engine that raised the error
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from complyhub.exceptions import DataAccessError
    >>> raise DataAccessError(
    ...     message="Coverage tree fetch failed",
    ...     data_source="coverage_tree",
    ...     operation="read",
    ... )
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class ComplyHubException(Exception):
    """Base exception for all ComplyHub errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "CH_DATA_DATA_ACCESS_ERROR")
        engine_name: Name of engine that raised the error (optional)
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    # Base error code prefix
    ERROR_PREFIX = "CH"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        engine_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize ComplyHub exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            engine_name: Name of engine that raised the error
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.engine_name = engine_name
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "CH_DATA_INVALID_SCHEMA"
        """
        class_name = self.__class__.__name__
        # CamelCase -> SCREAMING_SNAKE_CASE
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary with all error details
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "engine_name": self.engine_name,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        """String representation with error code and message."""
        parts = [f"[{self.error_code}]"]
        if self.engine_name:
            parts.append(f"Engine: {self.engine_name}")
        parts.append(self.message)
        return " - ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"engine_name='{self.engine_name}')"
        )


# ==============================================================================
# Engine Exceptions
# ==============================================================================

class EngineException(ComplyHubException):
    """Base exception for engine-level errors."""
    ERROR_PREFIX = "CH_ENGINE"


class ConfigurationError(EngineException):
    """Engine configuration is invalid.

    Example:
        >>> raise ConfigurationError(
        ...     message="partial_credit_weight must be within [0, 1]",
        ...     engine_name="CrossStandardService",
        ...     context={"partial_credit_weight": 1.5},
        ... )
    """
    pass


# ==============================================================================
# Data Exceptions
# ==============================================================================

class DataException(ComplyHubException):
    """Base exception for data-related errors."""
    ERROR_PREFIX = "CH_DATA"


class InvalidSchema(DataException):
    """A payload does not match the expected schema.

    Raised when an upstream source returns data that cannot be validated
    into the engine's input models.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        data_source: Optional[str] = None,
        validation_errors: Optional[list] = None,
    ):
        """Initialize schema error.

        Args:
            message: Error message
            context: Error context
            data_source: Source whose payload failed validation
            validation_errors: Validation error details
        """
        context = context or {}
        if data_source:
            context["data_source"] = data_source
        if validation_errors:
            context["validation_errors"] = validation_errors
        super().__init__(message, context=context)


class DataAccessError(DataException):
    """Data access failed.

    Raised when an upstream read (coverage tree, cross-references,
    document classifications) fails or times out.

    Example:
        >>> raise DataAccessError(
        ...     message="Failed to fetch cross-references",
        ...     data_source="cross_references",
        ...     operation="read",
        ...     cause=ConnectionError("connection reset"),
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        data_source: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize data access error.

        Args:
            message: Error message
            context: Error context
            data_source: Data source that failed
            operation: Operation that failed (read)
            cause: Original exception
        """
        context = context or {}
        if data_source:
            context["data_source"] = data_source
        if operation:
            context["operation"] = operation
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: BaseException) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current: Optional[BaseException] = exc

    while current is not None:
        if isinstance(current, ComplyHubException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")
        current = current.__cause__

    return "\n".join(lines)


def is_retriable(exc: BaseException) -> bool:
    """Check if exception is retriable.

    Args:
        exc: Exception to check

    Returns:
        True if the operation may succeed when retried
    """
    if isinstance(exc, DataAccessError):
        return True
    # Non-retriable: schema and configuration problems
    return False


__all__ = [
    "ComplyHubException",
    "EngineException",
    "ConfigurationError",
    "DataException",
    "InvalidSchema",
    "DataAccessError",
    "format_exception_chain",
    "is_retriable",
]
