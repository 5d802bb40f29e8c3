"""
Input validation utilities for the geoedit engine.

Provides validation functions for:
- Editable GeoJSON geometries (type, nesting, minimum sizes, ring closure)
- Features and feature collections
- Feature indexes, editing modes and the ring-closing tolerance

All validators return a ValidationResult with success status and error details.
"""

from dataclasses import dataclass
from typing import Any

from geoedit.errors import ErrorCode, UnsupportedGeometryError
from geoedit.geometry import GeometryType, geometry_type_of
from geoedit.mutations import MIN_LINE_POSITIONS, MIN_RING_POSITIONS


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    valid: bool
    error: str | None = None
    code: str | None = None
    value: Any = None  # Parsed/normalized value

    def to_error_response(self, **kwargs) -> dict:
        """Convert to error response dictionary."""
        if self.valid:
            return {}
        return {
            "error": self.error,
            "code": self.code or ErrorCode.VALIDATION_ERROR.value,
            **kwargs,
        }


def _invalid(error: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR) -> ValidationResult:
    return ValidationResult(valid=False, error=error, code=code.value)


# ============================================================
# GeoJSON Geometry Validation
# ============================================================

def _validate_ring(ring: list, label: str) -> ValidationResult:
    if len(ring) < MIN_RING_POSITIONS:
        return _invalid(
            f"{label} must have at least {MIN_RING_POSITIONS} positions "
            "(first and last must be the same)"
        )
    if list(ring[0]) != list(ring[-1]):
        return _invalid(f"{label} is not closed (first and last positions differ)")
    return ValidationResult(valid=True)


def _validate_line(line: list, label: str) -> ValidationResult:
    if len(line) < MIN_LINE_POSITIONS:
        return _invalid(f"{label} must have at least {MIN_LINE_POSITIONS} positions")
    return ValidationResult(valid=True)


def _validate_polygon(rings: list, label: str) -> ValidationResult:
    for i, ring in enumerate(rings):
        result = _validate_ring(ring, f"{label} ring {i}")
        if not result.valid:
            return result
    return ValidationResult(valid=True)


def validate_geometry(geometry: Any, field_name: str = "geometry") -> ValidationResult:
    """
    Validate an editable GeoJSON geometry.

    Checks:
    - Type is one of the six editable variants (GeometryCollection is not)
    - Coordinates are nested to the type's depth
    - LineStrings and lines have at least 2 positions
    - Rings have at least 4 positions and are closed

    An empty coordinate array is accepted: it is what removing the last
    part of a geometry leaves behind.

    Args:
        geometry: GeoJSON geometry object
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with the GeometryType if valid
    """
    if not geometry:
        return _invalid(f"{field_name} is required")

    try:
        geom_type = geometry_type_of(geometry)
    except UnsupportedGeometryError as e:
        return _invalid(f"{field_name}: {e.message}", ErrorCode.UNSUPPORTED_GEOMETRY)

    coords = geometry["coordinates"]
    result = ValidationResult(valid=True)

    if geom_type == GeometryType.LINE_STRING and coords:
        result = _validate_line(coords, "LineString")

    elif geom_type == GeometryType.MULTI_LINE_STRING:
        for i, line in enumerate(coords):
            result = _validate_line(line, f"MultiLineString line {i}")
            if not result.valid:
                break

    elif geom_type == GeometryType.POLYGON:
        result = _validate_polygon(coords, "Polygon")

    elif geom_type == GeometryType.MULTI_POLYGON:
        for i, rings in enumerate(coords):
            if not rings:
                result = _invalid(f"MultiPolygon polygon {i} has no rings")
            else:
                result = _validate_polygon(rings, f"MultiPolygon polygon {i}")
            if not result.valid:
                break

    if not result.valid:
        return ValidationResult(valid=False, error=f"{field_name}: {result.error}", code=result.code)
    return ValidationResult(valid=True, value=geom_type)


# ============================================================
# Feature Validation
# ============================================================

def validate_feature(feature: Any, field_name: str = "feature") -> ValidationResult:
    """
    Validate a GeoJSON Feature with an editable geometry.

    Properties are opaque and only need to be an object (or null).
    """
    if not isinstance(feature, dict):
        return _invalid(f"{field_name} must be a GeoJSON Feature object")

    if feature.get("type", "Feature") != "Feature":
        return _invalid(f"{field_name} must have type 'Feature'")

    properties = feature.get("properties")
    if properties is not None and not isinstance(properties, dict):
        return _invalid(f"{field_name} properties must be an object")

    result = validate_geometry(feature.get("geometry"), f"{field_name}.geometry")
    if not result.valid:
        return result
    return ValidationResult(valid=True, value=feature)


def validate_feature_collection(collection: Any) -> ValidationResult:
    """
    Validate a FeatureCollection, stopping at the first bad feature.

    Returns:
        ValidationResult with the feature count if valid
    """
    if not isinstance(collection, dict):
        return _invalid("collection must be a GeoJSON FeatureCollection object")

    if collection.get("type", "FeatureCollection") != "FeatureCollection":
        return _invalid("collection must have type 'FeatureCollection'")

    features = collection.get("features")
    if not isinstance(features, list):
        return _invalid("collection must have a 'features' array")

    for i, feature in enumerate(features):
        result = validate_feature(feature, f"features[{i}]")
        if not result.valid:
            return result

    return ValidationResult(valid=True, value=len(features))


# ============================================================
# Session Input Validation
# ============================================================

def validate_feature_index(index: Any, collection: dict, field_name: str = "feature_index") -> ValidationResult:
    """Validate an index into ``collection``'s features (None is allowed)."""
    if index is None:
        return ValidationResult(valid=True, value=None)

    if isinstance(index, bool) or not isinstance(index, int):
        return _invalid(f"{field_name} must be an integer")

    count = len(collection.get("features", []))
    if not 0 <= index < count:
        return _invalid(
            f"{field_name} must be between 0 and {count - 1} (got {index})",
            ErrorCode.INVALID_SELECTION,
        )
    return ValidationResult(valid=True, value=index)


def validate_mode(mode: Any, available: list[str]) -> ValidationResult:
    """Validate an editing mode name against the registered modes."""
    if not isinstance(mode, str) or not mode:
        return _invalid("mode must be a non-empty string")

    if mode not in available:
        return _invalid(
            f"Unknown mode '{mode}'. Must be one of: {', '.join(sorted(available))}",
            ErrorCode.UNKNOWN_MODE,
        )
    return ValidationResult(valid=True, value=mode)


def validate_tolerance(value: Any, field_name: str = "tolerance") -> ValidationResult:
    """Validate a ring-closing tolerance (a non-negative number)."""
    try:
        tolerance = float(value)
    except (ValueError, TypeError):
        return _invalid(f"{field_name} must be a number")

    if tolerance < 0:
        return _invalid(f"{field_name} must be >= 0 (got {tolerance})")
    return ValidationResult(valid=True, value=tolerance)
