"""
Geofence Polygon Item Module.

Draws a PolygonOverlay on the map scene. Geodesic polygons have their edges
densified along great circles before projection, so long edges curve the
way they do on a globe instead of following straight Mercator lines.
"""

import logging
from typing import Optional

from PySide6.QtGui import QBrush, QColor, QPen
from PySide6.QtWidgets import QGraphicsItem, QGraphicsPolygonItem

from src.core.map_math import geodesic_ring
from src.core.overlay import PolygonOverlay
from src.gui.widgets.map.coordinate_system import MapCoordinateSystem

logger = logging.getLogger(__name__)


class GeofencePolygonItem(QGraphicsPolygonItem):
    """
    Filled, stroked polygon region.

    The stroke is cosmetic: its width stays in screen pixels at every zoom.
    """

    def __init__(
        self,
        overlay: PolygonOverlay,
        coord_system: MapCoordinateSystem,
        parent: Optional[QGraphicsItem] = None,
    ) -> None:
        """
        Initializes a GeofencePolygonItem.

        Args:
            overlay: Polygon to draw.
            coord_system: Converter from LatLng to scene coordinates.
            parent: Optional parent item.
        """
        super().__init__(parent)
        self.polygon_id = overlay.polygon_id
        self._coord_system = coord_system

        # Between the basemap and the vertex handles
        self.setZValue(5)
        self.update_overlay(overlay)

    def update_overlay(self, overlay: PolygonOverlay) -> None:
        """
        Redraws the item for a new overlay.

        Args:
            overlay: Polygon to draw.
        """
        self.overlay = overlay
        ring = geodesic_ring(overlay.points) if overlay.geodesic else list(overlay.points)
        self.setPolygon(self._coord_system.to_scene_polygon(ring))

        stroke = QColor(overlay.stroke_color)
        pen = QPen(stroke, overlay.stroke_width)
        pen.setCosmetic(True)
        if overlay.stroke_width == 0:
            pen.setColor(QColor(0, 0, 0, 0))
        self.setPen(pen)

        fill = QColor(overlay.fill_color)
        fill.setAlphaF(overlay.fill_opacity)
        self.setBrush(QBrush(fill))

        logger.debug(
            f"Polygon {overlay.polygon_id}: {len(overlay.points)} vertices, "
            f"{len(ring)} drawn points"
        )
