"""
Geofence Editor State Module (Headless).

Holds the vertex list and the two mode flags of the geofence editor and
keeps the derived overlay consistent with them. Has no Qt dependency so the
editing rules can be exercised without a display.

Host notification contract:
    The polygon callback receives a copy of the full vertex list once per
    applied vertex mutation (add, move, delete-last, clear). Rejected
    operations (add in view mode, move with an out-of-range index,
    delete-last on an empty list) do not fire it. Clear is never rejected
    and always fires, even on an empty list.
"""

import logging
from typing import Callable, Iterable, List, Optional

from src.core.maps import GeofencePolygon, LatLng
from src.core.overlay import (
    GEOFENCE_POLYGON_ID,
    MapDisplayMode,
    MapEditMode,
    MapOverlay,
    OverlayStyle,
    derive_overlay,
    toggled_display_mode,
    toggled_edit_mode,
)

logger = logging.getLogger(__name__)

PolygonCallback = Callable[[List[LatLng]], None]
StateListener = Callable[["GeofenceEditorState"], None]

__all__ = [
    "GeofenceEditorState",
    "MapDisplayMode",
    "MapEditMode",
    "PolygonCallback",
]


class GeofenceEditorState:
    """
    State container for the polygon editor.

    Attributes:
        edit_mode: Whether taps add vertices and handles are shown.
        display_mode: Basemap style, cosmetic only.
    """

    def __init__(
        self,
        initial_points: Optional[Iterable[LatLng]] = None,
        on_polygon_updated: Optional[PolygonCallback] = None,
        edit_mode: MapEditMode = MapEditMode.VIEW,
        display_mode: MapDisplayMode = MapDisplayMode.NORMAL,
    ) -> None:
        """
        Initializes the editor state.

        Args:
            initial_points: Vertices to start with, copied.
            on_polygon_updated: Host callback for vertex list changes.
            edit_mode: Starting edit mode.
            display_mode: Starting display mode.
        """
        self._points: List[LatLng] = list(initial_points or [])
        self._on_polygon_updated = on_polygon_updated
        self.edit_mode = edit_mode
        self.display_mode = display_mode
        self._is_dragging = False
        self._listeners: List[StateListener] = []

    # --- Queries ---

    @property
    def points(self) -> List[LatLng]:
        """Returns a copy of the ordered vertex list."""
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    @property
    def is_dragging(self) -> bool:
        return self._is_dragging

    def derive_overlay(self, style: OverlayStyle) -> MapOverlay:
        """
        Builds the overlay for the current state.

        Args:
            style: Polygon styling.

        Returns:
            MapOverlay: Polygon region and drag handles to draw.
        """
        return derive_overlay(self._points, self.edit_mode, style)

    def to_polygon(self, polygon_id: str = GEOFENCE_POLYGON_ID) -> GeofencePolygon:
        """Returns a snapshot of the current boundary."""
        return GeofencePolygon(id=polygon_id, points=self.points)

    # --- Listeners ---

    def add_listener(self, callback: StateListener) -> None:
        """
        Registers a callback invoked after every applied state change.

        Args:
            callback: Function receiving this state object.
        """
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Unregisters a state change callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def _notify_polygon_update(self) -> None:
        self._changed()
        if self._on_polygon_updated is not None:
            self._on_polygon_updated(self.points)

    # --- Vertex mutations ---

    def add_vertex(self, position: LatLng) -> bool:
        """
        Appends a vertex to the end of the boundary.

        Only applied in edit mode.

        Args:
            position: Coordinate of the new vertex.

        Returns:
            bool: True if the vertex was added.
        """
        if self.edit_mode is not MapEditMode.EDIT:
            logger.debug(f"Ignoring vertex {position} outside edit mode")
            return False

        self._points.append(position)
        logger.debug(f"Added vertex {len(self._points) - 1} at {position}")
        self._notify_polygon_update()
        return True

    def move_vertex(self, index: int, position: LatLng) -> bool:
        """
        Replaces the vertex at ``index``.

        Args:
            index: Vertex position in the list; negative values are out of range.
            position: New coordinate.

        Returns:
            bool: True if a vertex was replaced.
        """
        self._is_dragging = False
        if not 0 <= index < len(self._points):
            logger.debug(
                f"Ignoring move of vertex {index}, list has {len(self._points)}"
            )
            return False

        self._points[index] = position
        logger.debug(f"Moved vertex {index} to {position}")
        self._notify_polygon_update()
        return True

    def delete_last_vertex(self) -> bool:
        """
        Removes the last vertex, in either mode.

        Returns:
            bool: True if a vertex was removed.
        """
        if not self._points:
            logger.debug("Nothing to delete, vertex list is empty")
            return False

        removed = self._points.pop()
        logger.debug(f"Deleted last vertex {removed}")
        self._notify_polygon_update()
        return True

    def clear_vertices(self) -> None:
        """Removes every vertex. Always notifies the host."""
        self._points.clear()
        self._is_dragging = False
        logger.debug("Cleared all vertices")
        self._notify_polygon_update()

    # --- Drag bookkeeping ---

    def begin_drag(self, index: int) -> None:
        """Marks a handle drag as in progress."""
        self._is_dragging = True
        logger.debug(f"Drag started on vertex {index}")

    # --- Mode toggles ---

    def toggle_edit_mode(self) -> MapEditMode:
        """
        Switches between view and edit mode.

        Leaving edit mode hides the handles but keeps every vertex.

        Returns:
            MapEditMode: The new mode.
        """
        self.edit_mode = toggled_edit_mode(self.edit_mode)
        self._is_dragging = False
        logger.debug(f"Edit mode is now {self.edit_mode.value}")
        self._changed()
        return self.edit_mode

    def toggle_display_mode(self) -> MapDisplayMode:
        """
        Switches between the normal and satellite basemap.

        Returns:
            MapDisplayMode: The new mode.
        """
        self.display_mode = toggled_display_mode(self.display_mode)
        logger.debug(f"Display mode is now {self.display_mode.value}")
        self._changed()
        return self.display_mode
