"""
Map Math Utilities.

Provides the geographic calculations the map surface needs:
- Web Mercator projection between LatLng and world pixel coordinates
- Great-circle densification of polygon edges for geodesic rendering
- Zoom clamping

World pixel coordinates follow the slippy-map convention: at zoom 0 the
whole world is a 256 x 256 pixel square with the origin at the top-left
(180 W, 85.05 N). Each zoom level doubles the size.
"""

from typing import List, Optional, Sequence, Tuple

from pyproj import Geod, Transformer

from src.core.maps import LatLng

TILE_SIZE = 256.0
MAX_MERCATOR_LATITUDE = 85.05112878
# Half the circumference of the Web Mercator sphere, in metres
MERCATOR_ORIGIN_SHIFT = 20037508.342789244

# Longest straight chord drawn along a geodesic edge
GEODESIC_SEGMENT_METERS = 10_000.0
MAX_GEODESIC_STEPS = 64

_to_mercator = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
_from_mercator = Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)
_geod = Geod(ellps="WGS84")


def clamp_latitude(latitude: float) -> float:
    """Clamps a latitude into the range Web Mercator can project."""
    return max(-MAX_MERCATOR_LATITUDE, min(MAX_MERCATOR_LATITUDE, latitude))


def clamp_zoom(zoom: float, min_zoom: float, max_zoom: float) -> float:
    """
    Clamps a zoom level into [min_zoom, max_zoom].

    Raises:
        ValueError: If min_zoom is greater than max_zoom.
    """
    if min_zoom > max_zoom:
        raise ValueError(f"min_zoom {min_zoom} is greater than max_zoom {max_zoom}")
    return max(min_zoom, min(max_zoom, zoom))


def latlng_to_world(position: LatLng) -> Tuple[float, float]:
    """
    Projects a coordinate to zoom-0 world pixels.

    Args:
        position: Geographic coordinate.

    Returns:
        Tuple[float, float]: (x, y) in [0, 256].
    """
    mx, my = _to_mercator.transform(
        position.longitude, clamp_latitude(position.latitude)
    )
    x = (mx + MERCATOR_ORIGIN_SHIFT) / (2 * MERCATOR_ORIGIN_SHIFT) * TILE_SIZE
    y = (MERCATOR_ORIGIN_SHIFT - my) / (2 * MERCATOR_ORIGIN_SHIFT) * TILE_SIZE
    return x, y


def world_to_latlng(x: float, y: float) -> LatLng:
    """
    Unprojects zoom-0 world pixels to a coordinate.

    Points outside the world square wrap in longitude and clamp in latitude.

    Args:
        x: World pixel X.
        y: World pixel Y.

    Returns:
        LatLng: Geographic coordinate.
    """
    y = max(0.0, min(TILE_SIZE, y))
    mx = x / TILE_SIZE * (2 * MERCATOR_ORIGIN_SHIFT) - MERCATOR_ORIGIN_SHIFT
    my = MERCATOR_ORIGIN_SHIFT - y / TILE_SIZE * (2 * MERCATOR_ORIGIN_SHIFT)
    lng, lat = _from_mercator.transform(mx, my)
    return LatLng(lat, lng)


def geodesic_distance(a: LatLng, b: LatLng) -> float:
    """Returns the WGS84 geodesic distance between two points, in metres."""
    _, _, distance = _geod.inv(a.longitude, a.latitude, b.longitude, b.latitude)
    return distance


def geodesic_edge(a: LatLng, b: LatLng) -> List[LatLng]:
    """
    Returns the intermediate points of the great-circle edge from a to b.

    Endpoints are not included. Short edges have no intermediate points.

    Args:
        a: Edge start.
        b: Edge end.

    Returns:
        List[LatLng]: Points strictly between a and b, in order.
    """
    steps = min(MAX_GEODESIC_STEPS, int(geodesic_distance(a, b) // GEODESIC_SEGMENT_METERS))
    if steps <= 0:
        return []
    return [
        LatLng(lat, lng)
        for lng, lat in _geod.npts(a.longitude, a.latitude, b.longitude, b.latitude, steps)
    ]


def geodesic_ring(points: Sequence[LatLng]) -> List[LatLng]:
    """
    Densifies a closed polygon ring along great circles.

    Args:
        points: Ordered ring vertices, not repeating the first vertex.

    Returns:
        List[LatLng]: The densified ring, starting at points[0] and not
        repeating it at the end.
    """
    ring: List[LatLng] = []
    count = len(points)
    for i, start in enumerate(points):
        ring.append(start)
        if count > 1:
            ring.extend(geodesic_edge(start, points[(i + 1) % count]))
    return ring


def ring_to_world(points: Sequence[LatLng]) -> List[Tuple[float, float]]:
    """
    Projects a ring to zoom-0 world pixels without breaking at the antimeridian.

    Each longitude is shifted by whole turns so it lies within 180 degrees of
    the previous point. Rings crossing 180 degrees therefore extend past the
    world square instead of wrapping around it.

    Args:
        points: Ordered ring vertices.

    Returns:
        List[Tuple[float, float]]: (x, y) per point; x may leave [0, 256].
    """
    projected: List[Tuple[float, float]] = []
    previous_lng: Optional[float] = None
    for position in points:
        turns = 0
        if previous_lng is not None:
            turns = round((previous_lng - position.longitude) / 360.0)
        x, y = latlng_to_world(position)
        projected.append((x + turns * TILE_SIZE, y))
        previous_lng = position.longitude + turns * 360.0
    return projected
