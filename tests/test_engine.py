"""
Tests for the engine boundary.

This module tests:
- Immutability and structural sharing of emitted collections
- Error policy (stale paths, stale selections, unsupported geometry)
- Event/session parsing
- Host-registered modes
"""

import copy

import pytest

from geoedit.emitter import append_feature, emit_add_feature, new_point_feature, replace_feature
from geoedit.engine import coerce_selection, dispatch_event, parse_event, parse_session
from geoedit.errors import UnknownModeError, UnsupportedGeometryError, ValidationError
from geoedit.models import EditingSession, EditType, EventKind
from geoedit.modes import Transition, register_mode, unregister_mode
from tests.samples import feature


class TestStructuralSharing:
    """Emitted collections are new, untouched features are shared."""

    def test_move_shares_untouched_features(self, collection, event, handle_pick, settings):
        snapshot = copy.deepcopy(collection)
        session = EditingSession(mode="modify", selected_feature_index=1)
        started = dispatch_event(
            collection, session, event("dragStart", [1, 0], picks=[handle_pick(1, (1,))]), settings
        )
        edit = dispatch_event(collection, started.session, event("dragStop", [1, 1]), settings).edit

        assert edit.updated_data is not collection
        assert edit.updated_data["features"] is not collection["features"]
        assert edit.updated_data["features"][1] is not collection["features"][1]
        for i in (0, 2, 3):
            assert edit.updated_data["features"][i] is collection["features"][i]
        assert collection == snapshot

    def test_add_feature_shares_existing(self, collection, event, settings):
        session = EditingSession(mode="drawPolygon")
        edit = dispatch_event(collection, session, event("click", [9, 9]), settings).edit

        assert edit.updated_data is not collection
        assert len(collection["features"]) == 4
        for i in range(4):
            assert edit.updated_data["features"][i] is collection["features"][i]

    def test_properties_passed_through(self, collection, event, handle_pick, settings):
        session = EditingSession(mode="modify", selected_feature_index=1)
        edit = dispatch_event(
            collection, session, event("click", [1, 0], picks=[handle_pick(1, (1,))]), settings
        ).edit
        assert edit.updated_data["features"][1]["properties"] == {"name": "road"}
        assert edit.updated_data["type"] == "FeatureCollection"


class TestEmitter:
    """Tests for emitter helpers."""

    def test_replace_feature(self, collection):
        geometry = {"type": "Point", "coordinates": [3, 3]}
        updated = replace_feature(collection, 0, geometry)
        assert updated["features"][0]["geometry"] is geometry
        assert collection["features"][0]["geometry"]["coordinates"] == [0, 0]

    def test_append_feature(self, empty_collection):
        updated, index = append_feature(empty_collection, new_point_feature([1, 2]))
        assert index == 0
        assert empty_collection["features"] == []
        assert updated["features"][0]["properties"] == {}

    def test_new_point_feature_copies_properties(self):
        properties = {"kind": "tree"}
        point = new_point_feature([1, 2], properties)
        assert point["properties"] == properties
        assert point["properties"] is not properties

    def test_emit_add_feature(self, empty_collection):
        session = EditingSession(mode="drawPoint")
        edit = emit_add_feature(empty_collection, session, new_point_feature([1, 2]))
        assert edit.edit_type == EditType.ADD_FEATURE
        assert edit.position == [1, 2]
        assert edit.to_dict()["edit_type"] == "addFeature"
        assert edit.to_dict()["position_indexes"] == []


class TestErrorPolicy:
    """Tests for the engine's error handling."""

    def test_stale_handle_path_is_ignored(self, collection, event, handle_pick, settings):
        """A handle from an older snapshot leaves everything unchanged."""
        session = EditingSession(mode="modify", selected_feature_index=1)
        transition = dispatch_event(
            collection, session, event("click", [1, 0], picks=[handle_pick(1, (7,))]), settings
        )
        assert transition.edit is None
        assert transition.session.selected_feature_index == 1
        assert transition.session.mode == "modify"

    def test_stale_drag_is_dropped(self, collection, event, handle_pick, settings):
        """A drag whose path went stale before dragStop commits nothing."""
        session = EditingSession(mode="modify", selected_feature_index=1)
        started = dispatch_event(
            collection, session, event("dragStart", [2, 0], picks=[handle_pick(1, (2,))]), settings
        )
        shorter = copy.deepcopy(collection)
        shorter["features"][1]["geometry"]["coordinates"] = [[0, 0], [1, 0]]

        stopped = dispatch_event(shorter, started.session, event("dragStop", [3, 3]), settings)
        assert stopped.edit is None
        assert stopped.session.pending is None

    def test_out_of_range_selection_coerced(self, collection, event, settings):
        session = EditingSession(mode="modify", selected_feature_index=12)
        transition = dispatch_event(collection, session, event("pointerMove", [0, 0]), settings)
        assert transition.session.selected_feature_index is None

    def test_stale_selection_in_draw_mode_starts_new_feature(self, collection, event, settings):
        session = EditingSession(mode="drawLineString", selected_feature_index=40)
        edit = dispatch_event(collection, session, event("click", [5, 1]), settings).edit
        assert edit.edit_type == EditType.ADD_FEATURE
        assert edit.updated_selected_feature_index == 4

    def test_unsupported_geometry_is_raised(self, event, handle_pick, settings):
        collection = {
            "type": "FeatureCollection",
            "features": [feature({"type": "GeometryCollection", "geometries": []})],
        }
        session = EditingSession(mode="modify", selected_feature_index=0)
        with pytest.raises(UnsupportedGeometryError) as exc_info:
            dispatch_event(
                collection, session, event("click", [0, 0], picks=[handle_pick(0, (0,))]), settings
            )
        assert exc_info.value.feature_index == 0

    @pytest.mark.parametrize("entry", [None, [1, 2], "feature"])
    def test_malformed_feature_is_raised(self, entry, event, settings):
        """A collection entry that is not a Feature object fails explicitly."""
        collection = {"type": "FeatureCollection", "features": [entry]}
        session = EditingSession(mode="drawLineString", selected_feature_index=0)
        with pytest.raises(UnsupportedGeometryError) as exc_info:
            dispatch_event(collection, session, event("click", [1, 1]), settings)
        assert exc_info.value.details["feature_index"] == 0

    def test_pending_drag_on_removed_feature_is_dropped(self, collection, event, settings):
        session = EditingSession(
            mode="modify",
            selected_feature_index=1,
            pending={"action": "move", "feature_index": 9, "position_indexes": [0], "position": [0, 0]},
        )
        transition = dispatch_event(collection, session, event("dragStop", [3, 3]), settings)
        assert transition.edit is None
        assert transition.session.pending is None
        assert transition.session.selected_feature_index == 1

    def test_unsupported_geometry_in_draw_mode(self, event, settings):
        collection = {
            "type": "FeatureCollection",
            "features": [feature({"type": "LineString", "coordinates": [[[0, 0]]]})],
        }
        session = EditingSession(mode="drawLineString", selected_feature_index=0)
        with pytest.raises(UnsupportedGeometryError):
            dispatch_event(collection, session, event("click", [1, 1]), settings)

    def test_unknown_mode(self, collection, event, settings):
        session = EditingSession(mode="lasso")
        with pytest.raises(UnknownModeError):
            dispatch_event(collection, session, event("click", [0, 0]), settings)

    def test_collection_without_features(self, event, settings):
        with pytest.raises(ValidationError):
            dispatch_event({"type": "FeatureCollection"}, None, event("click", [0, 0]), settings)


class TestParsing:
    """Tests for event and session parsing."""

    def test_parse_event(self):
        parsed = parse_event({
            "kind": "dragStart",
            "ground_coords": [1, 2],
            "picks": [{"feature_index": 0, "handle": {"position_indexes": [0, 1], "type": "existing"}}],
        })
        assert parsed.kind == EventKind.DRAG_START
        assert parsed.picks[0].handle.position_indexes == (0, 1)
        assert parsed.handle_picks() == parsed.picks
        assert parsed.feature_picks() == []

    def test_parse_event_missing_coords(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_event({"kind": "click"})
        assert exc_info.value.field == "event"

    def test_parse_event_unknown_kind(self):
        with pytest.raises(ValidationError):
            parse_event({"kind": "doubleTap", "ground_coords": [0, 0]})

    def test_parse_session_none_uses_settings(self, settings):
        drawing = settings.model_copy(update={"initial_mode": "drawPolygon"})
        session = parse_session(None, drawing)
        assert session.mode == "drawPolygon"
        assert session.selected_feature_index is None

    def test_parse_session_negative_index(self):
        with pytest.raises(ValidationError):
            parse_session({"mode": "modify", "selected_feature_index": -1})

    def test_session_round_trip_through_json(self, collection, event, handle_pick, settings):
        """A dumped session can be fed back in."""
        session = EditingSession(mode="modify", selected_feature_index=1)
        started = dispatch_event(
            collection, session, event("dragStart", [1, 0], picks=[handle_pick(1, (1,))]), settings
        )
        restored = parse_session(started.session.model_dump(mode="json"))
        assert restored == started.session

    def test_coerce_selection_keeps_valid(self, collection):
        session = EditingSession(mode="view", selected_feature_index=3)
        assert coerce_selection(collection, session) is session


class TestRegisteredModes:
    """Tests for host-registered modes."""

    def test_register_and_dispatch(self, collection, event, settings):
        def select_first(ctx):
            return Transition(session=ctx.session.evolve(selected_feature_index=0))

        register_mode("selectFirst", select_first)
        try:
            session = EditingSession(mode="selectFirst")
            transition = dispatch_event(collection, session, event("click", [0, 0]), settings)
            assert transition.session.selected_feature_index == 0
        finally:
            unregister_mode("selectFirst")

        with pytest.raises(UnknownModeError):
            dispatch_event(collection, EditingSession(mode="selectFirst"), event("click", [0, 0]), settings)

    def test_builtin_mode_cannot_be_replaced(self):
        with pytest.raises(ValidationError):
            register_mode("modify", lambda ctx: Transition(session=ctx.session))
