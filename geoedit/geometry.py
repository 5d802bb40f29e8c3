"""
Geometry variant tags for the editable GeoJSON geometry types.

Each tag carries the nesting depth of its coordinate structure, which is
also the length of every CoordinatePath into a geometry of that type.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Sequence, Union

from geoedit.errors import UnsupportedGeometryError

Position = list[float]
# Position | list of nested coordinates; depth is fixed by the geometry tag
Coordinates = Union[Position, list["Coordinates"]]


class GeometryType(str, Enum):
    """Editable GeoJSON geometry types."""

    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"

    @property
    def depth(self) -> int:
        """Number of array levels above a single position."""
        return _DEPTH[self]

    @property
    def is_multi(self) -> bool:
        return self in _MULTI

    @property
    def has_rings(self) -> bool:
        """Whether innermost position arrays are closed rings."""
        return self in (GeometryType.POLYGON, GeometryType.MULTI_POLYGON)


_DEPTH = {
    GeometryType.POINT: 0,
    GeometryType.LINE_STRING: 1,
    GeometryType.MULTI_POINT: 1,
    GeometryType.POLYGON: 2,
    GeometryType.MULTI_LINE_STRING: 2,
    GeometryType.MULTI_POLYGON: 3,
}

_MULTI = {
    GeometryType.MULTI_POINT,
    GeometryType.MULTI_LINE_STRING,
    GeometryType.MULTI_POLYGON,
}


def is_position(value: Any) -> bool:
    """Check for a 2D or 3D position of plain numbers."""
    if not isinstance(value, (list, tuple)) or len(value) not in (2, 3):
        return False
    return all(
        isinstance(c, (int, float)) and not isinstance(c, bool)
        for c in value
    )


def _check_nesting(coords: Any, depth: int) -> bool:
    if depth == 0:
        return is_position(coords)
    if not isinstance(coords, (list, tuple)):
        return False
    return all(_check_nesting(child, depth - 1) for child in coords)


def geometry_type_of(geometry: Any, feature_index: int | None = None) -> GeometryType:
    """
    Resolve the type tag of an editable geometry.

    Args:
        geometry: GeoJSON geometry dict
        feature_index: Index of the owning feature, for error details

    Returns:
        The geometry's GeometryType

    Raises:
        UnsupportedGeometryError: For GeometryCollection, unknown tags,
            missing coordinates or coordinates nested to the wrong depth
    """
    if not isinstance(geometry, dict):
        raise UnsupportedGeometryError(
            "Geometry must be a GeoJSON geometry object",
            feature_index=feature_index,
        )

    tag = geometry.get("type")
    if tag == "GeometryCollection":
        raise UnsupportedGeometryError(
            "GeometryCollection geometries cannot be edited",
            geometry_type=tag,
            feature_index=feature_index,
        )

    try:
        geom_type = GeometryType(tag)
    except ValueError:
        raise UnsupportedGeometryError(
            f"Unknown geometry type '{tag}'",
            geometry_type=str(tag),
            feature_index=feature_index,
        ) from None

    if not _check_nesting(geometry.get("coordinates"), geom_type.depth):
        raise UnsupportedGeometryError(
            f"{tag} coordinates are not nested {geom_type.depth} level(s) deep",
            geometry_type=tag,
            feature_index=feature_index,
        )

    return geom_type


def feature_geometry(feature: Any, feature_index: int | None = None) -> dict:
    """
    Return the editable geometry of a feature.

    Raises:
        UnsupportedGeometryError: If ``feature`` is not a Feature object or
            its geometry cannot be edited
    """
    if not isinstance(feature, dict):
        raise UnsupportedGeometryError(
            "Feature must be a GeoJSON Feature object",
            feature_index=feature_index,
        )
    geometry = feature.get("geometry")
    geometry_type_of(geometry, feature_index=feature_index)
    return geometry


def make_geometry(geom_type: GeometryType, coordinates: Coordinates) -> dict:
    """Build a GeoJSON geometry dict."""
    return {"type": geom_type.value, "coordinates": coordinates}


def positions_equal(a: Sequence[float], b: Sequence[float], tolerance: float = 0.0) -> bool:
    """
    Compare two positions axis by axis.

    Only the axes both positions share are compared, so a 2D click can
    match a 3D vertex. A tolerance of 0 means exact equality.
    """
    return all(
        math.isclose(x, y, rel_tol=0.0, abs_tol=tolerance)
        for x, y in zip(a, b)
    )


def midpoint(a: Sequence[float], b: Sequence[float]) -> Position:
    """Arithmetic midpoint in ground coordinates."""
    return [(x + y) / 2 for x, y in zip(a, b)]
