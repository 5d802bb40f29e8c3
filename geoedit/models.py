"""
Models for interaction events, editing sessions and edit events.

Interaction events arrive from the host's picking/gesture layer and are
parsed with pydantic. Sessions are frozen models: the engine takes one in
and hands the next one back. Edit events are dataclasses so that
``updated_data`` keeps the exact collection object the emitter built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from geoedit.config import Settings, get_settings


class EventKind(str, Enum):
    """Interaction event kinds, already classified by the host."""

    CLICK = "click"
    DRAG_START = "dragStart"
    DRAGGING = "dragging"
    DRAG_STOP = "dragStop"
    POINTER_MOVE = "pointerMove"


class HandleType(str, Enum):
    """Kinds of edit handle."""

    EXISTING = "existing"
    INTERMEDIATE = "intermediate"


class EditType(str, Enum):
    """Kinds of committed edit reported to the host."""

    ADD_FEATURE = "addFeature"
    ADD_POSITION = "addPosition"
    MOVE_POSITION = "movePosition"
    REMOVE_POSITION = "removePosition"


class PendingAction(str, Enum):
    """Drag gestures waiting for their dragStop."""

    MOVE = "move"
    INSERT = "insert"


# ============================================================
# Interaction Events
# ============================================================

class HandleRef(BaseModel):
    """A previously rendered edit handle, as reported by a pick."""

    position_indexes: tuple[int, ...] = Field(..., description="CoordinatePath of the handle")
    type: HandleType = Field(..., description="existing or intermediate")
    position: Optional[list[float]] = Field(None, description="Where the handle was drawn")


class Pick(BaseModel):
    """A resolved hit-test result."""

    feature_index: int = Field(..., ge=0, description="Index of the picked feature")
    handle: Optional[HandleRef] = Field(None, description="Picked handle, if any")

    @property
    def is_handle(self) -> bool:
        return self.handle is not None


class InteractionEvent(BaseModel):
    """One pointer interaction with picks and ground coordinates resolved."""

    kind: EventKind
    picks: list[Pick] = Field(default_factory=list)
    ground_coords: list[float] = Field(..., min_length=2, max_length=3)
    screen_coords: Optional[list[float]] = None
    drag_start_ground_coords: Optional[list[float]] = None
    drag_start_screen_coords: Optional[list[float]] = None

    def handle_picks(self) -> list[Pick]:
        return [p for p in self.picks if p.handle is not None]

    def feature_picks(self) -> list[Pick]:
        return [p for p in self.picks if p.handle is None]


# ============================================================
# Editing Session
# ============================================================

class PendingEdit(BaseModel):
    """A drag that has started on a handle but not yet been committed."""

    model_config = ConfigDict(frozen=True)

    action: PendingAction
    feature_index: int
    position_indexes: tuple[int, ...]
    position: list[float]


class EditingSession(BaseModel):
    """Engine-owned state: current mode, selection and drag in progress."""

    model_config = ConfigDict(frozen=True)

    mode: str = "view"
    selected_feature_index: Optional[int] = None
    pending: Optional[PendingEdit] = None

    @field_validator("selected_feature_index")
    @classmethod
    def _non_negative(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("selected_feature_index must be >= 0")
        return value

    @classmethod
    def initial(cls, settings: Settings | None = None) -> "EditingSession":
        """Build the starting session from configuration."""
        settings = settings or get_settings()
        return cls(mode=settings.initial_mode)

    def evolve(self, **changes: Any) -> "EditingSession":
        """Return a copy with ``changes`` applied."""
        return self.model_copy(update=changes)


# ============================================================
# Edit Events
# ============================================================

@dataclass
class EditEvent:
    """Outward description of a committed edit."""

    updated_data: dict
    updated_mode: str
    updated_selected_feature_index: Optional[int]
    edit_type: EditType
    feature_index: int
    position_indexes: tuple[int, ...] = field(default_factory=tuple)
    position: Optional[list[float]] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "updated_data": self.updated_data,
            "updated_mode": self.updated_mode,
            "updated_selected_feature_index": self.updated_selected_feature_index,
            "edit_type": self.edit_type.value,
            "feature_index": self.feature_index,
            "position_indexes": list(self.position_indexes),
            "position": self.position,
        }
