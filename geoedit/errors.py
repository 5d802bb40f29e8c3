"""
Custom exceptions and error handling utilities for the geoedit engine.

This module provides:
- Custom exception classes for the engine's error kinds
- Standardized error response formatting
- Error code constants for consistent error handling

Usage:
    from geoedit.errors import (
        EditorError,
        InvalidPathError,
        UnsupportedGeometryError,
        handle_edit_error,
        ErrorCode,
    )

    # Raise custom exceptions
    raise InvalidPathError("Path does not address a position", path=(0, 7))
    raise UnsupportedGeometryError("GeometryCollection", feature_index=3)

    # Convert errors for a host response
    try:
        transition = dispatch_event(collection, session, event)
    except Exception as e:
        return handle_edit_error(e)
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for engine responses."""

    # Input data errors
    UNSUPPORTED_GEOMETRY = "UNSUPPORTED_GEOMETRY"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Stale interaction errors
    INVALID_PATH = "INVALID_PATH"
    INVALID_SELECTION = "INVALID_SELECTION"

    # Configuration errors
    UNKNOWN_MODE = "UNKNOWN_MODE"

    # Generic errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class EditorError(Exception):
    """Base exception for editing engine errors.

    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        code: ErrorCode for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a standardized error response dict."""
        result = {
            "error": self.message,
            "code": self.code.value,
        }
        if self.details:
            result["details"] = self.details
        return result


class UnsupportedGeometryError(EditorError):
    """Raised when a geometry cannot be edited.

    Examples:
        - GeometryCollection geometry
        - Unknown geometry type tag
        - Coordinates nested deeper or shallower than the type allows

    Surfaced to the host instead of being skipped, since skipping a
    feature would shift every following feature index.
    """

    def __init__(
        self,
        message: str,
        geometry_type: str | None = None,
        feature_index: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if geometry_type is not None:
            details["geometry_type"] = geometry_type
        if feature_index is not None:
            details["feature_index"] = feature_index
        super().__init__(
            message=message,
            code=ErrorCode.UNSUPPORTED_GEOMETRY,
            details=details,
        )
        self.geometry_type = geometry_type
        self.feature_index = feature_index


class InvalidPathError(EditorError):
    """Raised when a coordinate path does not address a position.

    Usually means a handle was computed against an older snapshot of
    the collection.
    """

    def __init__(
        self,
        message: str,
        path: tuple[int, ...] | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if path is not None:
            details["path"] = list(path)
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_PATH,
            details=details,
        )
        self.path = path


class InvalidSelectionError(EditorError):
    """Raised when the selected feature index is outside the collection."""

    def __init__(
        self,
        index: int,
        feature_count: int,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["index"] = index
        details["feature_count"] = feature_count
        super().__init__(
            message=f"Selected feature index {index} is out of range (features: {feature_count})",
            code=ErrorCode.INVALID_SELECTION,
            details=details,
        )
        self.index = index
        self.feature_count = feature_count


class UnknownModeError(EditorError):
    """Raised when no handler is registered for an editing mode."""

    def __init__(
        self,
        mode: str,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["mode"] = mode
        super().__init__(
            message=f"Unknown editing mode: {mode}",
            code=ErrorCode.UNKNOWN_MODE,
            details=details,
        )
        self.mode = mode


class ValidationError(EditorError):
    """Raised when host-supplied input fails validation.

    Examples:
        - Malformed interaction event payload
        - Negative ring-closing tolerance
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=details,
        )
        self.field = field


def handle_edit_error(
    e: Exception,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Convert an exception to a standardized error response dict.

    Args:
        e: The exception to handle
        context: Additional context to include in the error response
            (e.g., {"feature_index": 2, "operation": "dispatch"})

    Returns:
        A dictionary with standardized error information:
        {
            "error": "Human-readable message",
            "code": "ERROR_CODE",
            "details": {...}  # Optional
        }
    """
    context = context or {}

    if isinstance(e, EditorError):
        result = e.to_dict()
        if context:
            result.setdefault("details", {}).update(context)
        return result

    result = {
        "error": f"Unexpected error: {str(e)}",
        "code": ErrorCode.UNKNOWN_ERROR.value,
        "exception_type": type(e).__name__,
    }
    if context:
        result.update(context)
    return result


def create_error_response(
    message: str,
    code: ErrorCode | str = ErrorCode.UNKNOWN_ERROR,
    **kwargs: Any,
) -> dict[str, Any]:
    """Create a standardized error response dict.

    A convenience function for creating error responses without
    raising exceptions.

    Args:
        message: Human-readable error message
        code: Error code (ErrorCode enum or string)
        **kwargs: Additional fields to include in the response

    Returns:
        Standardized error response dict

    Examples:
        return create_error_response(
            "Feature collection has no features",
            ErrorCode.VALIDATION_ERROR,
            field="features",
        )
    """
    result: dict[str, Any] = {
        "error": message,
        "code": code.value if isinstance(code, ErrorCode) else code,
    }
    result.update(kwargs)
    return result
