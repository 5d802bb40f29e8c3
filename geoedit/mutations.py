"""
Pure geometry mutations: move, add and remove a position at a path.

None of these functions touch their input. Arrays along the edited path
are copied; everything else is shared with the input geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from geoedit.errors import InvalidPathError
from geoedit.geometry import (
    Coordinates,
    GeometryType,
    Position,
    geometry_type_of,
    make_geometry,
    positions_equal,
)
from geoedit.models import EditType
from geoedit.paths import CoordinatePath, ring_index, sequence_at, validate_path

# Smallest legal sizes before a part collapses
MIN_LINE_POSITIONS = 2
MIN_RING_POSITIONS = 4


@dataclass
class MutationResult:
    """New geometry plus a description of what changed."""

    geometry: dict
    edit_type: EditType
    position_indexes: CoordinatePath
    position: Optional[Position]


def _update_at(coords: Coordinates, prefix: CoordinatePath, update: Callable[[list], list]) -> list:
    """Copy ``coords`` along ``prefix`` and replace the array there with ``update(array)``."""
    if not prefix:
        return update(coords)
    head, rest = prefix[0], prefix[1:]
    copied = list(coords)
    copied[head] = _update_at(coords[head], rest, update)
    return copied


def _without(items: Sequence, index: int) -> list:
    return [item for i, item in enumerate(items) if i != index]


def ring_closable(positions: Sequence[Position]) -> bool:
    """Whether a LineString has enough distinct vertices to close into a ring."""
    return len({tuple(p) for p in positions}) >= MIN_RING_POSITIONS - 1


def _check_depth(geom_type: GeometryType, path: CoordinatePath) -> None:
    if len(path) != geom_type.depth:
        raise InvalidPathError(
            f"{geom_type.value} paths have {geom_type.depth} index(es), got {len(path)}",
            path=path,
        )


# ============================================================
# Move
# ============================================================

def move_position(geometry: dict, path: CoordinatePath, position: Sequence[float]) -> MutationResult:
    """
    Replace the position at ``path``.

    Moving either end of a ring moves both, so rings stay closed.

    Raises:
        InvalidPathError: If ``path`` does not address an existing position
    """
    path = tuple(path)
    geom_type = validate_path(geometry, path)
    new_position = list(position)

    if geom_type == GeometryType.POINT:
        coords: Coordinates = new_position
    else:
        index = path[-1]

        def update(seq: list) -> list:
            seq = list(seq)
            if geom_type.has_rings:
                i = ring_index(seq, index)
                seq[i] = new_position
                if i == 0:
                    seq[-1] = list(new_position)
            else:
                seq[index] = new_position
            return seq

        coords = _update_at(geometry["coordinates"], path[:-1], update)

    return MutationResult(
        geometry=make_geometry(geom_type, coords),
        edit_type=EditType.MOVE_POSITION,
        position_indexes=path,
        position=new_position,
    )


# ============================================================
# Add
# ============================================================

def add_position(
    geometry: dict,
    path: CoordinatePath,
    position: Sequence[float],
    upgrade: bool = False,
    close_ring: bool = False,
    tolerance: float = 0.0,
) -> MutationResult:
    """
    Insert a position so that it ends up at ``path``.

    Args:
        geometry: GeoJSON geometry dict
        path: Insertion path. Lines and MultiPoints accept 0..len; rings
            accept 1..len-1 so the closing duplicate stays last.
        position: Ground coordinate to insert
        upgrade: Allow a Point to become a two-position LineString
        close_ring: Allow appending the first position of a LineString
            with at least 3 distinct positions to turn it into a Polygon
        tolerance: Per-axis tolerance for the ring-closing comparison

    Raises:
        InvalidPathError: If ``path`` is not a valid insertion point
    """
    path = tuple(path)
    geom_type = geometry_type_of(geometry)
    new_position = list(position)
    coords = geometry["coordinates"]

    if geom_type == GeometryType.POINT:
        if not upgrade:
            raise InvalidPathError("Cannot insert a position into a Point", path=path)
        return MutationResult(
            geometry=make_geometry(GeometryType.LINE_STRING, [list(coords), new_position]),
            edit_type=EditType.ADD_POSITION,
            position_indexes=(1,),
            position=new_position,
        )

    _check_depth(geom_type, path)
    prefix, index = path[:-1], path[-1]
    seq = sequence_at(coords, prefix)

    if (
        close_ring
        and geom_type == GeometryType.LINE_STRING
        and index == len(seq)
        and ring_closable(seq)
        and positions_equal(new_position, seq[0], tolerance)
    ):
        ring = list(seq) + [list(seq[0])]
        return MutationResult(
            geometry=make_geometry(GeometryType.POLYGON, [ring]),
            edit_type=EditType.ADD_POSITION,
            position_indexes=(0, len(ring) - 1),
            position=list(seq[0]),
        )

    if geom_type.has_rings:
        low, high = 1, len(seq) - 1
    else:
        low, high = 0, len(seq)
    if not low <= index <= high:
        raise InvalidPathError(
            f"Insertion index {index} outside {low}..{high}",
            path=path,
        )

    def update(target: list) -> list:
        return list(target[:index]) + [new_position] + list(target[index:])

    return MutationResult(
        geometry=make_geometry(geom_type, _update_at(coords, prefix, update)),
        edit_type=EditType.ADD_POSITION,
        position_indexes=path,
        position=new_position,
    )


# ============================================================
# Remove
# ============================================================

def _remove_from_ring(ring: list, index: int) -> list:
    i = ring_index(ring, index)
    remaining = _without(ring, i)
    if i == 0:
        remaining[-1] = list(remaining[0])
    return remaining


def remove_position(geometry: dict, path: CoordinatePath) -> MutationResult:
    """
    Remove the position at ``path``.

    A line left with fewer than 2 positions or a ring left with fewer than
    4 is removed entirely. Losing a polygon's exterior ring removes the
    whole polygon. A geometry whose last part goes away keeps an empty
    coordinate array; the feature itself is never deleted here.

    Raises:
        InvalidPathError: If ``path`` is absent, or addresses a Point
    """
    path = tuple(path)
    geom_type = validate_path(geometry, path)
    coords = geometry["coordinates"]

    if geom_type == GeometryType.POINT:
        raise InvalidPathError("A Point's only position cannot be removed", path=path)

    index = path[-1]

    if geom_type == GeometryType.MULTI_POINT:
        new_coords: Coordinates = _without(coords, index)

    elif geom_type == GeometryType.LINE_STRING:
        if len(coords) - 1 < MIN_LINE_POSITIONS:
            new_coords = []
        else:
            new_coords = _without(coords, index)

    elif geom_type == GeometryType.MULTI_LINE_STRING:
        line = path[0]
        if len(coords[line]) - 1 < MIN_LINE_POSITIONS:
            new_coords = _without(coords, line)
        else:
            new_coords = _update_at(coords, (line,), lambda seq: _without(seq, index))

    elif geom_type == GeometryType.POLYGON:
        ring = path[0]
        if len(coords[ring]) - 1 < MIN_RING_POSITIONS:
            new_coords = [] if ring == 0 else _without(coords, ring)
        else:
            new_coords = _update_at(coords, (ring,), lambda seq: _remove_from_ring(seq, index))

    else:  # MultiPolygon
        polygon, ring = path[0], path[1]
        if len(coords[polygon][ring]) - 1 < MIN_RING_POSITIONS:
            if ring == 0:
                new_coords = _without(coords, polygon)
            else:
                new_coords = _update_at(coords, (polygon,), lambda rings: _without(rings, ring))
        else:
            new_coords = _update_at(
                coords, (polygon, ring), lambda seq: _remove_from_ring(seq, index)
            )

    return MutationResult(
        geometry=make_geometry(geom_type, new_coords),
        edit_type=EditType.REMOVE_POSITION,
        position_indexes=path,
        position=None,
    )
