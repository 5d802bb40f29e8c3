"""
Edit emitter: the only place a new feature collection is built.

Every emitted collection is a new dict with a new ``features`` list.
Features the edit did not touch are the same objects as in the input.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from geoedit.geometry import GeometryType, make_geometry
from geoedit.logger import get_logger
from geoedit.models import EditEvent, EditingSession, EditType
from geoedit.mutations import MutationResult

logger = get_logger(__name__)


def replace_feature(collection: dict, index: int, geometry: dict) -> dict:
    """Return a new collection with feature ``index`` carrying ``geometry``."""
    features = list(collection.get("features", []))
    features[index] = {**features[index], "geometry": geometry}
    return {**collection, "features": features}


def append_feature(collection: dict, feature: dict) -> tuple[dict, int]:
    """Return a new collection with ``feature`` appended, and its index."""
    features = list(collection.get("features", []))
    features.append(feature)
    return {**collection, "features": features}, len(features) - 1


def new_point_feature(position: Sequence[float], properties: Optional[dict[str, Any]] = None) -> dict:
    """Build a Point feature at ``position``."""
    return {
        "type": "Feature",
        "geometry": make_geometry(GeometryType.POINT, list(position)),
        "properties": dict(properties or {}),
    }


def _checked_selection(collection: dict, index: Optional[int]) -> Optional[int]:
    if index is None:
        return None
    if not 0 <= index < len(collection["features"]):
        logger.warning(
            "Dropping selection outside updated collection",
            extra={"index": index, "feature_count": len(collection["features"])},
        )
        return None
    return index


def emit_mutation(
    collection: dict,
    session: EditingSession,
    feature_index: int,
    result: MutationResult,
    updated_mode: Optional[str] = None,
) -> EditEvent:
    """
    Apply a mutation result to feature ``feature_index`` and describe it.

    Args:
        collection: Current FeatureCollection dict
        session: Session the edit was made in
        feature_index: Index of the edited feature
        result: Output of a geometry mutation
        updated_mode: Mode to suggest to the host; defaults to the current one

    Returns:
        EditEvent carrying the new collection
    """
    updated = replace_feature(collection, feature_index, result.geometry)
    event = EditEvent(
        updated_data=updated,
        updated_mode=updated_mode or session.mode,
        updated_selected_feature_index=_checked_selection(updated, session.selected_feature_index),
        edit_type=result.edit_type,
        feature_index=feature_index,
        position_indexes=tuple(result.position_indexes),
        position=result.position,
    )
    logger.info(
        f"Emitted {event.edit_type.value}",
        extra={"feature_index": feature_index, "position_indexes": list(event.position_indexes)},
    )
    return event


def emit_add_feature(collection: dict, session: EditingSession, feature: dict) -> EditEvent:
    """Append ``feature``, select it and describe the addition."""
    updated, index = append_feature(collection, feature)
    geometry = feature.get("geometry") or {}
    event = EditEvent(
        updated_data=updated,
        updated_mode=session.mode,
        updated_selected_feature_index=index,
        edit_type=EditType.ADD_FEATURE,
        feature_index=index,
        position_indexes=(),
        position=geometry.get("coordinates") if geometry.get("type") == "Point" else None,
    )
    logger.info("Emitted addFeature", extra={"feature_index": index})
    return event
