"""
Edit handles for the selected feature.

Handles are recomputed from the collection on every call and serve both
the renderer (what to draw) and the picker (what can be hit).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from geoedit.errors import InvalidPathError, ValidationError
from geoedit.geometry import GeometryType, Position, feature_geometry, geometry_type_of, midpoint
from geoedit.logger import get_logger
from geoedit.models import EditingSession, HandleType, PendingAction
from geoedit.mutations import add_position, move_position
from geoedit.paths import CoordinatePath, iter_positions, iter_sequences

logger = get_logger(__name__)


@dataclass
class EditHandle:
    """A drawable, pickable vertex or insertion midpoint."""

    position: Position
    type: HandleType
    feature_index: int
    position_indexes: CoordinatePath

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position),
            "type": self.type.value,
            "feature_index": self.feature_index,
            "position_indexes": list(self.position_indexes),
        }


def _selected_feature(collection: dict, selected_feature_index: Optional[int]) -> Optional[Any]:
    if selected_feature_index is None:
        return None
    features = collection.get("features") if isinstance(collection, dict) else None
    if not isinstance(features, list):
        raise ValidationError("Feature collection must have a 'features' array", field="collection")
    if not 0 <= selected_feature_index < len(features):
        logger.debug(
            "Selected feature index out of range, no handles",
            extra={"index": selected_feature_index, "feature_count": len(features)},
        )
        return None
    return features[selected_feature_index]


def compute_handles(collection: dict, selected_feature_index: Optional[int]) -> list[EditHandle]:
    """
    Compute the edit handles of the selected feature.

    Existing handles come first, one per distinct position in depth-first
    order (a ring's closing duplicate is not a separate vertex). Then one
    intermediate handle per consecutive pair of each line or ring, tagged
    with the path a position inserted there would take.

    Args:
        collection: GeoJSON FeatureCollection dict
        selected_feature_index: Index of the selected feature, or None

    Returns:
        List of EditHandle; empty when nothing (valid) is selected

    Raises:
        UnsupportedGeometryError: If the selected feature cannot be edited
        ValidationError: If the collection has no features array
    """
    feature = _selected_feature(collection, selected_feature_index)
    if feature is None:
        return []

    geometry = feature_geometry(feature, feature_index=selected_feature_index)
    geom_type = geometry_type_of(geometry)

    handles = [
        EditHandle(
            position=position,
            type=HandleType.EXISTING,
            feature_index=selected_feature_index,
            position_indexes=path,
        )
        for path, position in iter_positions(geometry, distinct=True)
    ]

    if geom_type == GeometryType.MULTI_POINT:
        return handles

    for prefix, positions, _ in iter_sequences(geometry):
        for i in range(len(positions) - 1):
            handles.append(
                EditHandle(
                    position=midpoint(positions[i], positions[i + 1]),
                    type=HandleType.INTERMEDIATE,
                    feature_index=selected_feature_index,
                    position_indexes=prefix + (i + 1,),
                )
            )

    return handles


def compute_preview(collection: dict, session: EditingSession) -> Optional[dict]:
    """
    Build the tentative feature for a drag in progress.

    Returns:
        A copy of the dragged feature with the pending position applied,
        or None if no drag is pending or its handle has gone stale
    """
    pending = session.pending
    if pending is None:
        return None

    feature = _selected_feature(collection, pending.feature_index)
    if feature is None:
        return None

    geometry = feature_geometry(feature, feature_index=pending.feature_index)
    try:
        if pending.action == PendingAction.MOVE:
            result = move_position(geometry, pending.position_indexes, pending.position)
        else:
            result = add_position(geometry, pending.position_indexes, pending.position)
    except InvalidPathError:
        logger.debug("Stale pending drag, no preview", extra={"path": pending.position_indexes})
        return None

    return {**feature, "geometry": result.geometry}
