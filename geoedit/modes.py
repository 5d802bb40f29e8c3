"""
Editing modes and the dispatch table that routes events to them.

Every handler is a plain function of a ModeContext returning a Transition:
the next session plus the edit event, if the interaction committed one.
Handlers never expose raw geometry; committed edits go through the
emitter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from geoedit.config import Settings
from geoedit.emitter import emit_add_feature, emit_mutation, new_point_feature
from geoedit.errors import InvalidPathError, UnknownModeError, ValidationError
from geoedit.geometry import GeometryType, feature_geometry, geometry_type_of, positions_equal
from geoedit.logger import get_logger
from geoedit.models import (
    EditEvent,
    EditingSession,
    EventKind,
    HandleType,
    InteractionEvent,
    PendingAction,
    PendingEdit,
    Pick,
)
from geoedit.mutations import add_position, move_position, remove_position, ring_closable
from geoedit.validators import validate_feature_index, validate_mode

logger = get_logger(__name__)


class EditMode(str, Enum):
    """Built-in editing modes."""

    VIEW = "view"
    MODIFY = "modify"
    DRAW_POINT = "drawPoint"
    DRAW_LINE_STRING = "drawLineString"
    DRAW_POLYGON = "drawPolygon"


@dataclass
class ModeContext:
    """Everything a mode handler may look at."""

    collection: dict
    session: EditingSession
    event: InteractionEvent
    settings: Settings

    def geometry(self, feature_index: int) -> dict:
        """Geometry of ``feature_index``, checked to be editable."""
        features = self.collection["features"]
        if not 0 <= feature_index < len(features):
            raise InvalidPathError(
                f"Feature {feature_index} is not in the collection ({len(features)} features)"
            )
        return feature_geometry(features[feature_index], feature_index=feature_index)


@dataclass
class Transition:
    """Result of handling one event."""

    session: EditingSession
    edit: Optional[EditEvent] = None


ModeHandler = Callable[[ModeContext], Transition]


def _unchanged(ctx: ModeContext) -> Transition:
    return Transition(session=ctx.session)


def _select(ctx: ModeContext, feature_index: Optional[int]) -> Transition:
    check = validate_feature_index(feature_index, ctx.collection, "picks.feature_index")
    if not check.valid:
        logger.debug(f"Ignoring stale pick: {check.error}", extra={"feature_index": feature_index})
        return _unchanged(ctx)
    if feature_index != ctx.session.selected_feature_index:
        logger.debug("Selection changed", extra={"selected_feature_index": feature_index})
    return Transition(
        session=ctx.session.evolve(selected_feature_index=feature_index, pending=None)
    )


def _committed(ctx: ModeContext, edit: EditEvent) -> Transition:
    """Next session as it will be if the host adopts ``edit``."""
    session = ctx.session.evolve(
        mode=edit.updated_mode,
        selected_feature_index=edit.updated_selected_feature_index,
        pending=None,
    )
    return Transition(session=session, edit=edit)


# ============================================================
# view
# ============================================================

def handle_view(ctx: ModeContext) -> Transition:
    """Clicking a feature selects it; nothing else happens."""
    if ctx.event.kind == EventKind.CLICK and ctx.event.picks:
        return _select(ctx, ctx.event.picks[0].feature_index)
    return _unchanged(ctx)


# ============================================================
# modify
# ============================================================

def _selected_handle_pick(ctx: ModeContext) -> Optional[Pick]:
    selected = ctx.session.selected_feature_index
    for pick in ctx.event.handle_picks():
        if pick.feature_index == selected:
            return pick
    return None


def _modify_click(ctx: ModeContext) -> Transition:
    pick = _selected_handle_pick(ctx)
    if pick is not None and pick.handle.type == HandleType.EXISTING:
        geometry = ctx.geometry(pick.feature_index)
        result = remove_position(geometry, pick.handle.position_indexes)
        return _committed(
            ctx, emit_mutation(ctx.collection, ctx.session, pick.feature_index, result)
        )

    feature_picks = ctx.event.feature_picks()
    if feature_picks:
        return _select(ctx, feature_picks[0].feature_index)
    return _unchanged(ctx)


def _modify_drag_start(ctx: ModeContext) -> Transition:
    pick = _selected_handle_pick(ctx)
    if pick is None:
        return _unchanged(ctx)

    ctx.geometry(pick.feature_index)
    if pick.handle.type == HandleType.EXISTING:
        action = PendingAction.MOVE
    else:
        action = PendingAction.INSERT
    pending = PendingEdit(
        action=action,
        feature_index=pick.feature_index,
        position_indexes=pick.handle.position_indexes,
        position=list(ctx.event.ground_coords),
    )
    logger.debug(f"Drag started ({action.value})", extra={"path": list(pending.position_indexes)})
    return Transition(session=ctx.session.evolve(pending=pending))


def _modify_dragging(ctx: ModeContext) -> Transition:
    pending = ctx.session.pending
    if pending is None:
        return _unchanged(ctx)
    moved = pending.model_copy(update={"position": list(ctx.event.ground_coords)})
    return Transition(session=ctx.session.evolve(pending=moved))


def _modify_drag_stop(ctx: ModeContext) -> Transition:
    pending = ctx.session.pending
    if pending is None:
        return _unchanged(ctx)

    geometry = ctx.geometry(pending.feature_index)
    position = list(ctx.event.ground_coords)
    if pending.action == PendingAction.MOVE:
        result = move_position(geometry, pending.position_indexes, position)
    else:
        result = add_position(geometry, pending.position_indexes, position)

    session = ctx.session.evolve(pending=None)
    edit = emit_mutation(ctx.collection, session, pending.feature_index, result)
    return _committed(ctx, edit)


_MODIFY_EVENTS: dict[EventKind, ModeHandler] = {
    EventKind.CLICK: _modify_click,
    EventKind.DRAG_START: _modify_drag_start,
    EventKind.DRAGGING: _modify_dragging,
    EventKind.DRAG_STOP: _modify_drag_stop,
    EventKind.POINTER_MOVE: _unchanged,
}


def handle_modify(ctx: ModeContext) -> Transition:
    """Move, insert and remove positions of the selected feature through its handles."""
    return _MODIFY_EVENTS[ctx.event.kind](ctx)


# ============================================================
# draw modes
# ============================================================

def _add_point_feature(ctx: ModeContext) -> Transition:
    feature = new_point_feature(ctx.event.ground_coords)
    return _committed(ctx, emit_add_feature(ctx.collection, ctx.session, feature))


def handle_draw_point(ctx: ModeContext) -> Transition:
    """Every click adds a new Point feature."""
    if ctx.event.kind != EventKind.CLICK:
        return _unchanged(ctx)
    return _add_point_feature(ctx)


def _draw_click(ctx: ModeContext, polygon: bool) -> Transition:
    selected = ctx.session.selected_feature_index
    if selected is None:
        return _add_point_feature(ctx)

    geometry = ctx.geometry(selected)
    geom_type = geometry_type_of(geometry)
    coords = geometry["coordinates"]
    position = list(ctx.event.ground_coords)
    tolerance = ctx.settings.close_ring_tolerance

    if geom_type == GeometryType.POINT:
        last = coords
    elif geom_type == GeometryType.LINE_STRING and coords:
        last = coords[-1]
    else:
        # Nothing to extend: start a new feature
        return _add_point_feature(ctx)

    on_first = geom_type == GeometryType.LINE_STRING and positions_equal(position, coords[0], tolerance)
    closes = polygon and on_first and ring_closable(coords)
    if polygon and on_first and not closes:
        logger.debug("Ignoring click on the first position before the ring has 3 vertices")
        return _unchanged(ctx)
    if not closes and positions_equal(position, last, tolerance):
        logger.debug("Ignoring click on the last drawn position")
        return _unchanged(ctx)

    path = (len(coords),) if geom_type == GeometryType.LINE_STRING else ()
    result = add_position(
        geometry, path, position, upgrade=True, close_ring=polygon, tolerance=tolerance
    )

    updated_mode = None
    if result.geometry["type"] == GeometryType.POLYGON.value:
        updated_mode = EditMode.MODIFY.value
        logger.info("Polygon ring closed", extra={"feature_index": selected})

    edit = emit_mutation(ctx.collection, ctx.session, selected, result, updated_mode=updated_mode)
    return _committed(ctx, edit)


def handle_draw_line_string(ctx: ModeContext) -> Transition:
    """Build a LineString one click at a time."""
    if ctx.event.kind != EventKind.CLICK:
        return _unchanged(ctx)
    return _draw_click(ctx, polygon=False)


def handle_draw_polygon(ctx: ModeContext) -> Transition:
    """Build a LineString one click at a time and close it into a Polygon."""
    if ctx.event.kind != EventKind.CLICK:
        return _unchanged(ctx)
    return _draw_click(ctx, polygon=True)


# ============================================================
# Dispatch table
# ============================================================

BUILTIN_MODES: dict[str, ModeHandler] = {
    EditMode.VIEW.value: handle_view,
    EditMode.MODIFY.value: handle_modify,
    EditMode.DRAW_POINT.value: handle_draw_point,
    EditMode.DRAW_LINE_STRING.value: handle_draw_line_string,
    EditMode.DRAW_POLYGON.value: handle_draw_polygon,
}

MODE_HANDLERS: dict[str, ModeHandler] = dict(BUILTIN_MODES)


def register_mode(name: str, handler: ModeHandler) -> None:
    """
    Register a host-defined mode.

    Raises:
        ValidationError: If ``name`` is a built-in mode
    """
    if name in BUILTIN_MODES:
        raise ValidationError(f"Built-in mode '{name}' cannot be replaced", field="mode")
    MODE_HANDLERS[name] = handler
    logger.info(f"Registered mode '{name}'")


def unregister_mode(name: str) -> None:
    """Remove a host-defined mode; built-in modes stay."""
    if name not in BUILTIN_MODES:
        MODE_HANDLERS.pop(name, None)


def get_mode_handler(mode: str) -> ModeHandler:
    """
    Look up the handler for ``mode``.

    Raises:
        UnknownModeError: If no handler is registered
    """
    check = validate_mode(mode, available_modes())
    if not check.valid:
        raise UnknownModeError(mode)
    return MODE_HANDLERS[mode]


def available_modes() -> list[str]:
    return list(MODE_HANDLERS)
