"""
Coordinate paths into nested GeoJSON coordinate arrays.

A CoordinatePath is a tuple of indices with one entry per array level of
the geometry type: () for a Point, (i,) for a LineString or MultiPoint,
(ring, i) for a Polygon, (line, i) for a MultiLineString and
(polygon, ring, i) for a MultiPolygon. Tuple ordering is the depth-first
reading order of the coordinates.
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence

from geoedit.errors import InvalidPathError
from geoedit.geometry import Coordinates, GeometryType, Position, geometry_type_of

CoordinatePath = tuple[int, ...]


def sequence_at(coordinates: Coordinates, prefix: CoordinatePath) -> list:
    """Walk ``prefix`` down the coordinate arrays and return the array reached."""
    node: Any = coordinates
    for depth, index in enumerate(prefix):
        if not isinstance(node, (list, tuple)) or not 0 <= index < len(node):
            raise InvalidPathError(
                f"Index {index} at level {depth} is out of range",
                path=prefix,
            )
        node = node[index]
    return node


def validate_path(geometry: dict, path: CoordinatePath) -> GeometryType:
    """
    Check that ``path`` addresses an existing position.

    Returns:
        The geometry's type, resolved along the way

    Raises:
        InvalidPathError: If the path length does not match the geometry's
            depth or any index is out of range
    """
    geom_type = geometry_type_of(geometry)
    if len(path) != geom_type.depth:
        raise InvalidPathError(
            f"{geom_type.value} paths have {geom_type.depth} index(es), got {len(path)}",
            path=path,
        )
    sequence_at(geometry["coordinates"], path)
    return geom_type


def get_position(geometry: dict, path: CoordinatePath) -> Position:
    """Return the position at ``path``."""
    validate_path(geometry, path)
    return sequence_at(geometry["coordinates"], path)


def iter_sequences(geometry: dict) -> Iterator[tuple[CoordinatePath, list, bool]]:
    """
    Yield every innermost position array in depth-first order.

    Yields:
        (prefix, positions, is_ring) where ``prefix`` is the path of the
        array itself. Point geometries yield nothing.
    """
    geom_type = geometry_type_of(geometry)
    coords = geometry["coordinates"]

    if geom_type in (GeometryType.LINE_STRING, GeometryType.MULTI_POINT):
        yield (), coords, False
    elif geom_type in (GeometryType.POLYGON, GeometryType.MULTI_LINE_STRING):
        for i, part in enumerate(coords):
            yield (i,), part, geom_type.has_rings
    elif geom_type == GeometryType.MULTI_POLYGON:
        for i, polygon in enumerate(coords):
            for j, ring in enumerate(polygon):
                yield (i, j), ring, True


def iter_positions(
    geometry: dict,
    distinct: bool = False,
) -> Iterator[tuple[CoordinatePath, Position]]:
    """
    Yield (path, position) for every position in depth-first order.

    Args:
        geometry: GeoJSON geometry dict
        distinct: Skip the closing duplicate of each ring
    """
    if geometry_type_of(geometry) == GeometryType.POINT:
        yield (), geometry["coordinates"]
        return

    for prefix, positions, is_ring in iter_sequences(geometry):
        count = len(positions)
        if distinct and is_ring and count > 1:
            count -= 1
        for i in range(count):
            yield prefix + (i,), positions[i]


def ring_index(ring: Sequence[Position], index: int) -> int:
    """Map a ring's closing index onto index 0; other indexes pass through."""
    if len(ring) > 1 and index == len(ring) - 1:
        return 0
    return index
