"""
Map Coordinate System Module.

Handles translation between the coordinate spaces of the map surface:
1. Geographic Coordinates: LatLng in degrees.
2. Scene Coordinates: zoom-0 Web Mercator world pixels, 256 x 256.

The view scales the scene by 2^zoom, so scene coordinates are independent
of the current zoom level.
"""

from typing import List, Sequence

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPolygonF

from src.core.map_math import (
    TILE_SIZE,
    latlng_to_world,
    ring_to_world,
    world_to_latlng,
)
from src.core.maps import LatLng


class MapCoordinateSystem:
    """
    Manages coordinate transformations for the map surface.
    """

    def __init__(self) -> None:
        """Initializes the MapCoordinateSystem with the whole-world scene rect."""
        self._scene_rect = QRectF(0.0, 0.0, TILE_SIZE, TILE_SIZE)

    @property
    def scene_rect(self) -> QRectF:
        """The bounding rectangle of the world in scene coordinates."""
        return QRectF(self._scene_rect)

    def to_scene(self, position: LatLng) -> QPointF:
        """
        Converts a geographic coordinate to scene coordinates.

        Args:
            position: Coordinate in degrees.

        Returns:
            QPointF: Point in scene coordinates.
        """
        x, y = latlng_to_world(position)
        return QPointF(x, y)

    def to_latlng(self, scene_pos: QPointF) -> LatLng:
        """
        Converts scene coordinates to a geographic coordinate.

        Args:
            scene_pos: Point in scene coordinates.

        Returns:
            LatLng: Coordinate in degrees.
        """
        return world_to_latlng(scene_pos.x(), scene_pos.y())

    def to_scene_polygon(self, positions: Sequence[LatLng]) -> QPolygonF:
        """
        Converts an ordered ring of coordinates to a scene polygon.

        Rings crossing the antimeridian stay continuous and may extend past
        the scene rect.

        Args:
            positions: Ring vertices.

        Returns:
            QPolygonF: Polygon in scene coordinates.
        """
        points: List[QPointF] = [QPointF(x, y) for x, y in ring_to_world(positions)]
        return QPolygonF(points)
