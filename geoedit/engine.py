"""
Engine boundary: one interaction event in, the next session (and maybe an
edit event) out.

Error policy:
- a stale handle path (InvalidPathError) is ignored and the session is
  returned with any pending drag dropped
- a selection outside the collection is coerced to no selection
- an uneditable geometry (UnsupportedGeometryError) is raised to the host
"""

from __future__ import annotations

from typing import Any, Optional

import pydantic

from geoedit.config import Settings, get_settings
from geoedit.errors import InvalidPathError, InvalidSelectionError, ValidationError
from geoedit.handles import compute_handles, compute_preview
from geoedit.logger import get_logger
from geoedit.models import EditingSession, InteractionEvent
from geoedit.modes import ModeContext, Transition, get_mode_handler
from geoedit.validators import validate_feature_index

logger = get_logger(__name__)

__all__ = [
    "dispatch_event",
    "coerce_selection",
    "parse_event",
    "parse_session",
    "compute_handles",
    "compute_preview",
]


def _validation_error(e: pydantic.ValidationError, field: str) -> ValidationError:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return ValidationError(
        f"Invalid {field}: {location or field}: {first.get('msg')}",
        field=field,
        details={"errors": e.error_count()},
    )


def parse_event(data: InteractionEvent | dict[str, Any]) -> InteractionEvent:
    """
    Parse a host interaction event.

    Raises:
        ValidationError: If the payload is malformed
    """
    if isinstance(data, InteractionEvent):
        return data
    try:
        return InteractionEvent.model_validate(data)
    except pydantic.ValidationError as e:
        raise _validation_error(e, "event") from e


def parse_session(data: EditingSession | dict[str, Any] | None, settings: Optional[Settings] = None) -> EditingSession:
    """
    Parse a host-held session; None starts a fresh one.

    Raises:
        ValidationError: If the payload is malformed
    """
    if data is None:
        return EditingSession.initial(settings)
    if isinstance(data, EditingSession):
        return data
    try:
        return EditingSession.model_validate(data)
    except pydantic.ValidationError as e:
        raise _validation_error(e, "session") from e


def _feature_count(collection: dict) -> int:
    if not isinstance(collection, dict) or not isinstance(collection.get("features"), list):
        raise ValidationError("Feature collection must have a 'features' array", field="collection")
    return len(collection["features"])


def coerce_selection(collection: dict, session: EditingSession) -> EditingSession:
    """Drop a selection that no longer points into ``collection``."""
    index = session.selected_feature_index
    count = _feature_count(collection)
    if validate_feature_index(index, collection, "selected_feature_index").valid:
        return session

    error = InvalidSelectionError(index, count)
    logger.warning(error.message, extra=error.details)
    return session.evolve(selected_feature_index=None, pending=None)


def dispatch_event(
    collection: dict,
    session: EditingSession | dict[str, Any] | None,
    event: InteractionEvent | dict[str, Any],
    settings: Optional[Settings] = None,
) -> Transition:
    """
    Handle one interaction event.

    Args:
        collection: Current GeoJSON FeatureCollection dict (never modified)
        session: Session from the previous transition, or None to start one
        event: Interaction event with resolved picks and ground coordinates
        settings: Engine settings; defaults to the cached environment settings

    Returns:
        Transition with the next session and, if an edit was committed,
        the EditEvent. Hosts that reject the edit keep their previous
        collection and session.

    Raises:
        UnsupportedGeometryError: If the event touches an uneditable geometry
        UnknownModeError: If the session's mode has no handler
        ValidationError: If the event, session or collection is malformed
    """
    settings = settings or get_settings()
    event = parse_event(event)
    session = coerce_selection(collection, parse_session(session, settings))

    handler = get_mode_handler(session.mode)
    context = ModeContext(collection=collection, session=session, event=event, settings=settings)

    try:
        transition = handler(context)
    except InvalidPathError as e:
        logger.debug(
            f"Ignoring {event.kind.value} on stale handle: {e.message}",
            extra=e.details,
        )
        return Transition(session=session.evolve(pending=None))

    if transition.edit is not None:
        logger.debug(
            f"{session.mode} {event.kind.value} committed {transition.edit.edit_type.value}",
            extra={"feature_index": transition.edit.feature_index},
        )
    return transition
