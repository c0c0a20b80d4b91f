"""Unit tests for overlay derivation."""

import pytest

from src.core.maps import LatLng
from src.core.overlay import (
    GEOFENCE_POLYGON_ID,
    MapDisplayMode,
    MapEditMode,
    OverlayStyle,
    derive_overlay,
    handle_id_for,
    index_from_handle_id,
    toggled_display_mode,
    toggled_edit_mode,
)


@pytest.fixture
def style():
    return OverlayStyle(color="#FF5722", fill_opacity=0.5, stroke_width=3)


class TestDeriveOverlay:
    """Tests for derive_overlay()."""

    def test_empty_points(self, style):
        """Test that no points produce an empty overlay in both modes."""
        for mode in MapEditMode:
            overlay = derive_overlay([], mode, style)
            assert overlay.polygons == ()
            assert overlay.handles == ()
            assert overlay.is_empty

    def test_polygon_requires_three_points(self, style):
        """Test that the polygon appears only from three vertices on."""
        two = [LatLng(0, 0), LatLng(1, 0)]
        assert derive_overlay(two, MapEditMode.VIEW, style).polygons == ()

        three = two + [LatLng(1, 1)]
        polygons = derive_overlay(three, MapEditMode.VIEW, style).polygons
        assert len(polygons) == 1
        assert polygons[0].points == tuple(three)

    def test_polygon_styling(self, style, square_points):
        """Test that the polygon carries the configured style."""
        polygon = derive_overlay(square_points, MapEditMode.EDIT, style).polygons[0]

        assert polygon.polygon_id == GEOFENCE_POLYGON_ID
        assert polygon.stroke_color == "#FF5722"
        assert polygon.fill_color == "#FF5722"
        assert polygon.fill_opacity == 0.5
        assert polygon.stroke_width == 3
        assert polygon.geodesic is True

    def test_handles_only_in_edit_mode(self, style, square_points):
        """Test one handle per vertex in edit mode and none in view mode."""
        assert derive_overlay(square_points, MapEditMode.VIEW, style).handles == ()

        handles = derive_overlay(square_points, MapEditMode.EDIT, style).handles
        assert [h.index for h in handles] == [0, 1, 2]
        assert [h.position for h in handles] == square_points
        assert all(h.draggable for h in handles)
        assert all(h.anchor == (0.5, 0.5) for h in handles)

    def test_handles_below_polygon_threshold(self, style):
        """Test that handles are shown even before the polygon is."""
        overlay = derive_overlay([LatLng(0, 0)], MapEditMode.EDIT, style)
        assert overlay.polygons == ()
        assert len(overlay.handles) == 1
        assert not overlay.is_empty

    def test_handle_ids_unique(self, style):
        """Test that handle ids are unique and stable per index."""
        points = [LatLng(i, i) for i in range(5)]
        handles = derive_overlay(points, MapEditMode.EDIT, style).handles
        ids = [h.handle_id for h in handles]
        assert len(set(ids)) == 5
        assert ids[3] == handle_id_for(3)

    def test_unknown_mode_rejected(self, style):
        """Test that an unknown mode value raises."""
        with pytest.raises(ValueError):
            derive_overlay([], "edit", style)


class TestHandleIds:
    """Tests for handle id encoding."""

    def test_round_trip(self):
        assert index_from_handle_id(handle_id_for(7)) == 7

    @pytest.mark.parametrize("handle_id", ["marker_1", "vertex_", "vertex_x", ""])
    def test_foreign_ids(self, handle_id):
        """Test that ids not produced by handle_id_for() are rejected."""
        assert index_from_handle_id(handle_id) is None


class TestModeToggles:
    """Tests for the mode toggle helpers."""

    def test_edit_mode_toggle(self):
        assert toggled_edit_mode(MapEditMode.VIEW) is MapEditMode.EDIT
        assert toggled_edit_mode(MapEditMode.EDIT) is MapEditMode.VIEW

    def test_display_mode_toggle(self):
        assert toggled_display_mode(MapDisplayMode.NORMAL) is MapDisplayMode.SATELLITE
        assert toggled_display_mode(MapDisplayMode.SATELLITE) is MapDisplayMode.NORMAL

    def test_unknown_values_rejected(self):
        with pytest.raises(ValueError):
            toggled_edit_mode("view")
        with pytest.raises(ValueError):
            toggled_display_mode(None)
