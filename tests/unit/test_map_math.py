"""Unit tests for map math utilities."""

import pytest

from src.core.map_math import (
    MAX_GEODESIC_STEPS,
    MAX_MERCATOR_LATITUDE,
    TILE_SIZE,
    clamp_latitude,
    clamp_zoom,
    geodesic_distance,
    geodesic_edge,
    geodesic_ring,
    latlng_to_world,
    ring_to_world,
    world_to_latlng,
)
from src.core.maps import LatLng


class TestProjection:
    """Tests for the Web Mercator projection."""

    def test_origin_projects_to_center(self):
        x, y = latlng_to_world(LatLng(0.0, 0.0))
        assert x == pytest.approx(TILE_SIZE / 2)
        assert y == pytest.approx(TILE_SIZE / 2)

    def test_corners(self):
        x, y = latlng_to_world(LatLng(MAX_MERCATOR_LATITUDE, -180.0))
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_north_is_up(self):
        _, north = latlng_to_world(LatLng(45.0, 0.0))
        _, south = latlng_to_world(LatLng(-45.0, 0.0))
        assert north < TILE_SIZE / 2 < south

    def test_poles_are_clamped(self):
        _, y = latlng_to_world(LatLng(90.0, 0.0))
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_round_trip(self):
        pos = LatLng(51.5074, -0.1278)
        back = world_to_latlng(*latlng_to_world(pos))
        assert back.latitude == pytest.approx(pos.latitude, abs=1e-9)
        assert back.longitude == pytest.approx(pos.longitude, abs=1e-9)

    def test_world_to_latlng_clamps_y(self):
        top = world_to_latlng(128.0, -50.0)
        assert top.latitude == pytest.approx(MAX_MERCATOR_LATITUDE, abs=1e-6)


class TestClamping:
    """Tests for clamping helpers."""

    def test_clamp_latitude(self):
        assert clamp_latitude(89.0) == MAX_MERCATOR_LATITUDE
        assert clamp_latitude(-89.0) == -MAX_MERCATOR_LATITUDE
        assert clamp_latitude(10.0) == 10.0

    def test_clamp_zoom(self):
        assert clamp_zoom(25.0, 1.0, 20.0) == 20.0
        assert clamp_zoom(0.0, 1.0, 20.0) == 1.0
        assert clamp_zoom(8.5, 1.0, 20.0) == 8.5

    def test_clamp_zoom_invalid_bounds(self):
        with pytest.raises(ValueError):
            clamp_zoom(5.0, 10.0, 1.0)


class TestGeodesic:
    """Tests for great-circle helpers."""

    def test_distance_one_degree_at_equator(self):
        distance = geodesic_distance(LatLng(0.0, 0.0), LatLng(0.0, 1.0))
        assert distance == pytest.approx(111_319.5, rel=1e-3)

    def test_short_edge_has_no_intermediate_points(self):
        assert geodesic_edge(LatLng(0.0, 0.0), LatLng(0.0, 0.01)) == []

    def test_equator_edge_stays_on_equator(self):
        points = geodesic_edge(LatLng(0.0, 0.0), LatLng(0.0, 1.0))

        assert len(points) == 11
        assert all(p.latitude == pytest.approx(0.0, abs=1e-9) for p in points)
        longitudes = [p.longitude for p in points]
        assert longitudes == sorted(longitudes)
        assert 0.0 < longitudes[0] and longitudes[-1] < 1.0

    def test_long_edge_is_capped(self):
        points = geodesic_edge(LatLng(0.0, 0.0), LatLng(0.0, 90.0))
        assert len(points) == MAX_GEODESIC_STEPS

    def test_long_edge_bows_poleward(self):
        """Great circles between two northern points pass north of the parallel."""
        points = geodesic_edge(LatLng(50.0, -60.0), LatLng(50.0, 60.0))
        assert max(p.latitude for p in points) > 50.0

    def test_ring_keeps_vertices_in_order(self, square_points):
        ring = geodesic_ring(square_points)

        assert ring[0] == square_points[0]
        indices = [ring.index(p) for p in square_points]
        assert indices == sorted(indices)
        assert len(ring) > len(square_points)

    def test_ring_of_one_point(self):
        assert geodesic_ring([LatLng(1.0, 1.0)]) == [LatLng(1.0, 1.0)]

    def test_empty_ring(self):
        assert geodesic_ring([]) == []


class TestRingProjection:
    """Tests for ring_to_world()."""

    def test_matches_point_projection_away_from_antimeridian(self, square_points):
        assert ring_to_world(square_points) == [latlng_to_world(p) for p in square_points]

    def test_antimeridian_ring_stays_compact(self):
        """A small ring straddling 180 degrees spans well under a pixel."""
        ring = [LatLng(0.0, 179.9), LatLng(0.0, -179.9), LatLng(0.1, -179.9)]
        xs = [x for x, _ in ring_to_world(ring)]

        assert max(xs) - min(xs) < 1.0
        assert max(xs) > TILE_SIZE

    def test_densified_antimeridian_ring_stays_compact(self):
        ring = geodesic_ring(
            [LatLng(10.0, 179.0), LatLng(10.0, -179.0), LatLng(11.0, -179.0)]
        )
        xs = [x for x, _ in ring_to_world(ring)]

        assert len(ring) > 3
        assert max(xs) - min(xs) < 2.0

    def test_westward_crossing_extends_below_zero(self):
        xs = [x for x, _ in ring_to_world([LatLng(0.0, -179.9), LatLng(0.0, 179.9)])]
        assert xs[1] < 0.0 < xs[0]

    def test_empty_ring(self):
        assert ring_to_world([]) == []
