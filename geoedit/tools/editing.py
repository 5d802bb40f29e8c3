"""
Editing tools for hosts that talk in plain JSON-like dicts.

Each tool takes GeoJSON and session payloads as dicts and returns a dict:
either the result or a standardized error response.
"""

from typing import Any, Optional

from geoedit.config import Settings, get_settings
from geoedit.engine import dispatch_event, parse_session
from geoedit.errors import EditorError, ErrorCode, create_error_response, handle_edit_error
from geoedit.handles import compute_handles, compute_preview
from geoedit.logger import EditCallLogger, get_logger, log_edit_call
from geoedit.modes import available_modes
from geoedit.validators import validate_feature_collection, validate_tolerance

logger = get_logger(__name__)


def _settings_with(close_ring_tolerance: Optional[float]) -> Settings | dict:
    settings = get_settings()
    if close_ring_tolerance is None:
        return settings
    check = validate_tolerance(close_ring_tolerance, "close_ring_tolerance")
    if not check.valid:
        return check.to_error_response()
    return settings.model_copy(update={"close_ring_tolerance": check.value})


def handle_interaction(
    collection: dict,
    event: dict,
    session: Optional[dict] = None,
    close_ring_tolerance: Optional[float] = None,
) -> dict:
    """
    Dispatch one interaction event.

    Args:
        collection: GeoJSON FeatureCollection
        event: Interaction event ({kind, picks, ground_coords, ...})
        session: Session returned by the previous call (None starts one)
        close_ring_tolerance: Override for the ring-closing tolerance

    Returns:
        {"session": next session, "edit": edit event or None}
    """
    with EditCallLogger(logger, "handle_interaction", kind=(event or {}).get("kind")) as log:
        settings = _settings_with(close_ring_tolerance)
        if isinstance(settings, dict):
            log.set_result(settings)
            return settings

        try:
            transition = dispatch_event(collection, session, event, settings=settings)
            result = {
                "session": transition.session.model_dump(mode="json"),
                "edit": transition.edit.to_dict() if transition.edit else None,
            }
        except EditorError as e:
            logger.warning(f"Interaction rejected: {e.message}", extra={"code": e.code.value})
            result = handle_edit_error(e, {"operation": "handle_interaction"})

        log.set_result(result)
        return result


def get_edit_handles(collection: dict, selected_feature_index: Optional[int] = None) -> dict:
    """
    Compute edit handles for the selected feature.

    Returns:
        {"handles": [...], "count": n}
    """
    with EditCallLogger(logger, "get_edit_handles", selected=selected_feature_index) as log:
        try:
            handles = compute_handles(collection, selected_feature_index)
            result = {
                "handles": [handle.to_dict() for handle in handles],
                "count": len(handles),
            }
        except EditorError as e:
            result = handle_edit_error(e, {"operation": "get_edit_handles"})

        log.set_result(result)
        return result


def get_edit_preview(collection: dict, session: Optional[dict] = None) -> dict:
    """
    Return the tentative feature for a drag in progress.

    Returns:
        {"feature": feature dict or None}
    """
    with EditCallLogger(logger, "get_edit_preview") as log:
        try:
            feature = compute_preview(collection, parse_session(session))
            result: dict[str, Any] = {"feature": feature}
        except EditorError as e:
            result = handle_edit_error(e, {"operation": "get_edit_preview"})

        log.set_result(result)
        return result


def check_feature_collection(collection: dict) -> dict:
    """
    Check that every feature in a collection can be edited.

    Returns:
        {"valid": True, "feature_count": n} or an error response
    """
    with EditCallLogger(logger, "check_feature_collection") as log:
        check = validate_feature_collection(collection)
        if check.valid:
            result = {"valid": True, "feature_count": check.value}
        else:
            result = create_error_response(
                check.error,
                check.code or ErrorCode.VALIDATION_ERROR,
                valid=False,
            )
        log.set_result(result)
        return result


@log_edit_call(logger, "list_modes")
def list_modes() -> dict:
    """List the registered editing modes."""
    return {
        "modes": available_modes(),
        "initial_mode": get_settings().initial_mode,
    }
