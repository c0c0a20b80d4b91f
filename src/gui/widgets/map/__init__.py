"""
Map Widget Package.

Provides the map surface components used by the geofence editor.
"""

from src.gui.widgets.map.map_graphics_view import GeofenceMapView
from src.gui.widgets.map.polygon_item import GeofencePolygonItem
from src.gui.widgets.map.vertex_handle_item import VertexHandleItem

__all__ = [
    "GeofenceMapView",
    "GeofencePolygonItem",
    "VertexHandleItem",
]
