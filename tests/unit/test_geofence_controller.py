"""Unit tests for the geofence controller interface."""

import pytest

from src.core.geofence_controller import (
    InteractiveMapGeofenceController,
    controller_for,
)


class RecordingController(InteractiveMapGeofenceController):
    """Controller that records which operations were invoked."""

    def __init__(self):
        self.calls = []

    def toggle_map_type(self):
        self.calls.append("toggle_map_type")

    def toggle_edit_mode(self):
        self.calls.append("toggle_edit_mode")

    def delete_last_vertex(self):
        self.calls.append("delete_last_vertex")

    def clear_polygon(self):
        self.calls.append("clear_polygon")


class TestControllerInterface:
    """Tests for the abstract controller."""

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            InteractiveMapGeofenceController()

    def test_incomplete_implementation_rejected(self):
        class Partial(InteractiveMapGeofenceController):
            def toggle_map_type(self):
                pass

        with pytest.raises(TypeError):
            Partial()

    def test_operations_dispatch(self):
        controller = RecordingController()
        controller.toggle_edit_mode()
        controller.delete_last_vertex()
        controller.clear_polygon()
        controller.toggle_map_type()

        assert controller.calls == [
            "toggle_edit_mode",
            "delete_last_vertex",
            "clear_polygon",
            "toggle_map_type",
        ]


class TestControllerFor:
    """Tests for controller_for()."""

    def test_returns_implementation(self):
        controller = RecordingController()
        assert controller_for(controller) is controller

    @pytest.mark.parametrize("obj", [None, object(), "widget"])
    def test_returns_none_for_other_objects(self, obj):
        assert controller_for(obj) is None
