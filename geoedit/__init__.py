"""
geoedit: an interactive editing engine for GeoJSON feature collections.

Turns pointer interaction events (with picks and ground coordinates
already resolved by the host) into immutable feature collection updates.

Usage:
    from geoedit import EditingSession, dispatch_event, compute_handles

    session = EditingSession(mode="drawPolygon")
    transition = dispatch_event(collection, session, {
        "kind": "click",
        "ground_coords": [139.7, 35.6],
    })
    if transition.edit:
        collection = transition.edit.updated_data
    session = transition.session
"""

from geoedit.engine import dispatch_event, parse_event, parse_session
from geoedit.errors import (
    EditorError,
    ErrorCode,
    InvalidPathError,
    InvalidSelectionError,
    UnknownModeError,
    UnsupportedGeometryError,
    ValidationError,
)
from geoedit.geometry import GeometryType
from geoedit.handles import EditHandle, compute_handles, compute_preview
from geoedit.models import (
    EditEvent,
    EditingSession,
    EditType,
    EventKind,
    HandleRef,
    HandleType,
    InteractionEvent,
    Pick,
)
from geoedit.modes import EditMode, Transition, register_mode, unregister_mode
from geoedit.mutations import MutationResult, add_position, move_position, remove_position

__version__ = "0.1.0"

__all__ = [
    # Engine
    "dispatch_event",
    "parse_event",
    "parse_session",
    "Transition",
    # Modes
    "EditMode",
    "register_mode",
    "unregister_mode",
    # Mutations
    "MutationResult",
    "add_position",
    "move_position",
    "remove_position",
    # Handles
    "EditHandle",
    "compute_handles",
    "compute_preview",
    # Models
    "EditEvent",
    "EditingSession",
    "EditType",
    "EventKind",
    "HandleRef",
    "HandleType",
    "InteractionEvent",
    "Pick",
    "GeometryType",
    # Errors
    "EditorError",
    "ErrorCode",
    "InvalidPathError",
    "InvalidSelectionError",
    "UnknownModeError",
    "UnsupportedGeometryError",
    "ValidationError",
]
