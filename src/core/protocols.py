"""
Protocol Interfaces for Loose Coupling.

This module defines Protocol interfaces (PEP 544) between the geofence
editor and the map surface it draws on. The editor only issues requests
through these methods and reacts to the surface's signals; projection,
rendering and gesture handling stay inside the surface.

Protocols allow structural subtyping: any class that implements the
required members satisfies the protocol without explicit inheritance.
"""

from typing import Any, Protocol, Sequence, runtime_checkable

from src.core.hit_testing import ScreenCoordinate
from src.core.maps import LatLng
from src.core.marker_glyph import VertexMarkerGlyph
from src.core.overlay import MapDisplayMode, PolygonOverlay, VertexHandle


@runtime_checkable
class MapSurface(Protocol):
    """
    Protocol for the map rendering and gesture collaborator.

    Signals (Qt-style objects with ``connect``/``emit``):
        map_ready: Emitted once when the surface can serve requests.
        map_tapped: (latitude: float, longitude: float)
        marker_drag_started: (handle_id: str)
        marker_drag_ended: (handle_id: str, latitude: float, longitude: float)
    """

    map_ready: Any
    map_tapped: Any
    marker_drag_started: Any
    marker_drag_ended: Any

    def set_map_type(self, mode: MapDisplayMode) -> None:
        """Switches the basemap style."""
        ...

    def set_polygons(self, polygons: Sequence[PolygonOverlay]) -> None:
        """
        Replaces every drawn polygon.

        Args:
            polygons: Polygons to draw; an empty sequence removes all.
        """
        ...

    def set_markers(
        self, handles: Sequence[VertexHandle], glyph: VertexMarkerGlyph
    ) -> None:
        """
        Replaces every drawn marker.

        Args:
            handles: Markers to draw; an empty sequence removes all.
            glyph: Icon shared by the markers.
        """
        ...

    def to_screen_coordinate(self, position: LatLng) -> ScreenCoordinate:
        """
        Converts a coordinate to viewport pixels.

        Args:
            position: Geographic coordinate.

        Returns:
            ScreenCoordinate: Position in the surface viewport.
        """
        ...

    def set_map_style(self, style_json: str) -> bool:
        """
        Applies a style sheet to the basemap chrome.

        Args:
            style_json: Style rules as JSON.

        Returns:
            bool: False if the style could not be applied.
        """
        ...

    def viewport_width(self) -> int:
        """Returns the current viewport width in pixels."""
        ...
