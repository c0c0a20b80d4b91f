"""
Unit tests for the GeofenceMapView map surface.
"""

import pytest
from PySide6.QtCore import QPoint, Qt

from src.core.map_style import poi_suppression_style_json
from src.core.maps import LatLng
from src.core.marker_glyph import create_vertex_marker_glyph
from src.core.overlay import MapDisplayMode, MapEditMode, OverlayStyle, derive_overlay
from src.core.protocols import MapSurface
from src.gui.widgets.map.map_graphics_view import GeofenceMapView, palette_for
from src.gui.widgets.map.polygon_item import GeofencePolygonItem
from src.gui.widgets.map.vertex_handle_item import VertexHandleItem

LONDON = LatLng(51.5074, -0.1278)


@pytest.fixture
def view(qtbot):
    """Provides a GeofenceMapView instance."""
    view = GeofenceMapView(initial_position=LONDON, initial_zoom=8.0)
    qtbot.addWidget(view)
    return view


@pytest.fixture
def shown_view(qtbot, view):
    """Provides a visible 400x300 view."""
    view.resize(400, 300)
    with qtbot.waitSignal(view.map_ready, timeout=2000):
        view.show()
    qtbot.waitExposed(view)
    view.set_camera(LONDON)
    return view


@pytest.fixture
def glyph():
    return create_vertex_marker_glyph("#2196F3")


def edit_overlay(points):
    return derive_overlay(points, MapEditMode.EDIT, OverlayStyle())


class TestInitialization:
    """Tests for construction."""

    def test_view_initialization(self, view):
        assert view.scene is not None
        assert view.polygons == {}
        assert view.markers == {}
        assert view.display_mode is MapDisplayMode.NORMAL
        assert not view.is_ready

    def test_satisfies_surface_protocol(self, view):
        assert isinstance(view, MapSurface)

    def test_initial_zoom_clamped(self, qtbot):
        view = GeofenceMapView(initial_zoom=30.0, max_zoom=18.0)
        qtbot.addWidget(view)
        assert view.zoom == 18.0

    def test_map_ready_emitted_once(self, qtbot, view):
        emitted = []
        view.map_ready.connect(lambda: emitted.append(True))

        view.show()
        qtbot.waitExposed(view)
        view.hide()
        view.show()

        assert view.is_ready
        assert emitted == [True]


class TestBasemap:
    """Tests for map type and style handling."""

    def test_set_map_type(self, view):
        view.set_map_type(MapDisplayMode.SATELLITE)
        assert view.display_mode is MapDisplayMode.SATELLITE

    def test_unknown_map_type_rejected(self, view):
        with pytest.raises(ValueError):
            view.set_map_type("hybrid")
        assert view.display_mode is MapDisplayMode.NORMAL

    def test_palettes_differ(self):
        assert palette_for(MapDisplayMode.NORMAL) != palette_for(
            MapDisplayMode.SATELLITE
        )

    def test_apply_poi_style(self, view):
        assert view.set_map_style(poi_suppression_style_json()) is True
        assert view.is_feature_visible("poi.business") is False
        assert view.is_feature_visible("road") is True

    def test_invalid_style_keeps_previous(self, view):
        view.set_map_style(poi_suppression_style_json())

        assert view.set_map_style("{broken") is False
        assert view.is_feature_visible("poi") is False


class TestOverlays:
    """Tests for polygon and marker synchronisation."""

    def test_set_polygons(self, view, square_points):
        view.set_polygons(edit_overlay(square_points).polygons)
        assert list(view.polygons) == ["geofence"]

        view.set_polygons(())
        assert view.polygons == {}
        assert not any(isinstance(i, GeofencePolygonItem) for i in view.scene.items())

    def test_polygon_item_updated_in_place(self, view, square_points):
        view.set_polygons(edit_overlay(square_points).polygons)
        item = view.polygons["geofence"]

        view.set_polygons(edit_overlay(square_points + [LatLng(0, 1)]).polygons)
        assert view.polygons["geofence"] is item
        assert len(item.overlay.points) == 4

    def test_antimeridian_polygon_not_drawn_across_world(self, view):
        points = [LatLng(0.0, 179.9), LatLng(0.0, -179.9), LatLng(0.1, -179.9)]
        view.set_polygons(edit_overlay(points).polygons)

        bounds = view.polygons["geofence"].polygon().boundingRect()
        assert bounds.width() < 1.0

    def test_set_markers(self, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)

        assert sorted(view.markers) == ["vertex_0", "vertex_1", "vertex_2"]
        item = view.markers["vertex_1"]
        expected = view.coord_system.to_scene(square_points[1])
        assert item.pos().x() == pytest.approx(expected.x())
        assert item.pos().y() == pytest.approx(expected.y())

    def test_markers_reused_by_id(self, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)
        first = view.markers["vertex_0"]

        moved = [LatLng(0.5, 0.5)] + square_points[1:]
        view.set_markers(edit_overlay(moved).handles, glyph)
        assert view.markers["vertex_0"] is first

    def test_markers_removed(self, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)
        view.set_markers((), glyph)

        assert view.markers == {}
        assert not any(isinstance(i, VertexHandleItem) for i in view.scene.items())

    def test_marker_glyph_size(self, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)
        rect = view.markers["vertex_0"].boundingRect()

        assert rect.width() == pytest.approx(glyph.logical_size)
        assert rect.center().x() == pytest.approx(0.0)

    def test_drag_finished_reports_latlng(self, qtbot, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)
        scene_pos = view.coord_system.to_scene(LatLng(10.0, 20.0))

        with qtbot.waitSignal(view.marker_drag_ended) as blocker:
            view.markers["vertex_2"].drag_finished.emit(
                "vertex_2", scene_pos.x(), scene_pos.y()
            )

        handle_id, lat, lng = blocker.args
        assert handle_id == "vertex_2"
        assert lat == pytest.approx(10.0, abs=1e-6)
        assert lng == pytest.approx(20.0, abs=1e-6)

    def test_drag_started_forwarded(self, qtbot, view, glyph, square_points):
        view.set_markers(edit_overlay(square_points).handles, glyph)

        with qtbot.waitSignal(view.marker_drag_started) as blocker:
            view.markers["vertex_0"].drag_started.emit("vertex_0")
        assert blocker.args == ["vertex_0"]


class TestCameraAndTaps:
    """Tests for projection and tap detection on a visible view."""

    def test_camera_centre_projects_to_viewport_centre(self, shown_view):
        point = shown_view.to_screen_coordinate(LONDON)
        assert point.x == pytest.approx(200, abs=2)
        assert point.y == pytest.approx(150, abs=2)
        assert shown_view.viewport_width() == 400

    def test_camera_position(self, shown_view):
        center = shown_view.camera_position()
        assert center.latitude == pytest.approx(LONDON.latitude, abs=0.02)
        assert center.longitude == pytest.approx(LONDON.longitude, abs=0.02)

    def test_click_emits_tap(self, qtbot, shown_view):
        with qtbot.waitSignal(shown_view.map_tapped, timeout=2000) as blocker:
            qtbot.mouseClick(
                shown_view.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(200, 150)
            )

        lat, lng = blocker.args
        assert lat == pytest.approx(LONDON.latitude, abs=0.02)
        assert lng == pytest.approx(LONDON.longitude, abs=0.02)

    def test_set_rotation_keeps_centre(self, shown_view):
        shown_view.set_rotation(90.0)
        assert shown_view.rotation == 90.0
        point = shown_view.to_screen_coordinate(LONDON)
        assert point.x == pytest.approx(200, abs=2)
        assert point.y == pytest.approx(150, abs=2)

    def test_set_camera_zoom_clamped(self, shown_view):
        shown_view.set_camera(LONDON, zoom=50.0)
        assert shown_view.zoom == shown_view.max_zoom
