"""
Geofence Map Widget Module.

Provides InteractiveMapGeofence, a map widget with an editable polygon
layer for drawing geofence and delivery-zone boundaries.

The widget renders the map surface, keeps the derived overlay (polygon and
vertex handles) in step with the editor state, and offers built-in buttons
for the map type, edit mode, undo and clear. Hosts observe the boundary via
the polygon_updated signal or the on_polygon_updated callback, and drive it
through the InteractiveMapGeofenceController interface the widget
implements.
"""

import logging
from typing import Any, Callable, List, Optional

from PySide6.QtCore import Signal
from PySide6.QtGui import QGuiApplication, QResizeEvent, QShowEvent
from PySide6.QtWidgets import QVBoxLayout, QWidget

from src.core.editor_config import GeofenceEditorConfig
from src.core.geofence import GeofenceEditorState, PolygonCallback
from src.core.geofence_controller import InteractiveMapGeofenceController
from src.core.hit_testing import CONTROLS_MARGIN, ControlExclusionZone
from src.core.map_style import poi_suppression_style_json
from src.core.maps import GeofencePolygon, LatLng
from src.core.marker_glyph import create_vertex_marker_glyph
from src.core.overlay import (
    GEOFENCE_POLYGON_ID,
    MapDisplayMode,
    MapEditMode,
    MapOverlay,
    index_from_handle_id,
)
from src.core.protocols import MapSurface
from src.gui.widgets.map.map_graphics_view import GeofenceMapView
from src.gui.widgets.standard_buttons import MapControlButton

logger = logging.getLogger(__name__)

DELETE_BUTTON_COLOR = "#F44336"


class InteractiveMapGeofence(QWidget):
    """
    Map widget for drawing and editing a geofence polygon.

    In edit mode a tap on the map appends a vertex and every vertex shows a
    drag handle. View mode shows the polygon without handles. The vertex
    list is never touched by mode changes.

    Signals:
        polygon_updated: Emitted with the full vertex list after every
                         applied vertex change. Args: (points: list)
    """

    polygon_updated = Signal(list)

    def __init__(
        self,
        config: Optional[GeofenceEditorConfig] = None,
        on_polygon_updated: Optional[PolygonCallback] = None,
        surface: Optional[MapSurface] = None,
        parent: Optional[QWidget] = None,
        **options: Any,
    ) -> None:
        """
        Initializes the geofence editor widget.

        Args:
            config: Construction-time options; keyword options override it.
            on_polygon_updated: Called with the full vertex list after every
                applied vertex change.
            surface: Map surface to draw on; a GeofenceMapView is created
                when omitted.
            parent: Parent widget.
            **options: GeofenceEditorConfig fields.
        """
        super().__init__(parent)

        if config is None:
            config = GeofenceEditorConfig(**options)
        elif options:
            config = config.with_overrides(**options)
        self.config = config
        self._on_polygon_updated = on_polygon_updated
        self._style = config.overlay_style

        # Set once the surface reports it is ready; taps before that wait here
        self._map_ready = False
        self._pending_taps: List[Callable[[MapSurface], None]] = []
        self._fixed_zone = ControlExclusionZone()

        self.state = GeofenceEditorState(
            initial_points=config.initial_points,
            on_polygon_updated=self._notify_polygon_update,
        )

        if surface is None:
            surface = GeofenceMapView(
                initial_position=config.initial_position,
                initial_zoom=config.initial_zoom,
                min_zoom=config.min_zoom,
                max_zoom=config.max_zoom,
                enable_rotate=config.enable_rotate,
                enable_tilt=config.enable_tilt,
                enable_compass=config.enable_compass,
            )
        self.surface = surface

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        if isinstance(surface, QWidget):
            layout.addWidget(surface)

        self._glyph = create_vertex_marker_glyph(
            config.marker_color,
            self._device_pixel_ratio(),
            compact=config.compact_markers,
        )

        self.surface.map_ready.connect(self._on_map_created)
        self.surface.map_tapped.connect(self._on_map_tapped)
        self.surface.marker_drag_started.connect(self._on_marker_drag_started)
        self.surface.marker_drag_ended.connect(self._on_marker_drag_ended)

        self.controls: Optional[QWidget] = None
        if config.show_controls:
            self._build_controls()

        self.state.add_listener(self._on_state_changed)
        self._render()

        logger.debug(
            f"Geofence editor created with {len(self.state)} initial points, "
            f"controls={'on' if config.show_controls else 'off'}"
        )

    # --- Host integration ---

    @property
    def controller(self) -> InteractiveMapGeofenceController:
        """The imperative control interface for host applications."""
        return self

    @property
    def points(self) -> List[LatLng]:
        """Copy of the current vertex list."""
        return self.state.points

    @property
    def edit_mode(self) -> MapEditMode:
        return self.state.edit_mode

    @property
    def display_mode(self) -> MapDisplayMode:
        return self.state.display_mode

    @property
    def overlay(self) -> MapOverlay:
        """The overlay currently drawn on the surface."""
        return self.state.derive_overlay(self._style)

    def polygon(self, polygon_id: str = GEOFENCE_POLYGON_ID) -> GeofencePolygon:
        """Returns a snapshot of the current boundary."""
        return self.state.to_polygon(polygon_id)

    def toggle_map_type(self) -> None:
        """Switches between the normal and satellite basemap."""
        self.state.toggle_display_mode()

    def toggle_edit_mode(self) -> None:
        """Switches between view and edit mode."""
        self.state.toggle_edit_mode()

    def delete_last_vertex(self) -> None:
        """Removes the most recently added vertex, if any."""
        self.state.delete_last_vertex()

    def clear_polygon(self) -> None:
        """Removes every vertex."""
        self.state.clear_vertices()

    def _notify_polygon_update(self, points: List[LatLng]) -> None:
        self.polygon_updated.emit(points)
        if self._on_polygon_updated is not None:
            self._on_polygon_updated(points)

    # --- Rendering ---

    def _on_state_changed(self, state: GeofenceEditorState) -> None:
        self._render()

    def _render(self) -> None:
        """Recomputes the overlay and pushes it to the surface."""
        overlay = self.state.derive_overlay(self._style)
        self.surface.set_map_type(self.state.display_mode)
        self.surface.set_polygons(overlay.polygons)
        self.surface.set_markers(overlay.handles, self._glyph)
        self._update_controls()

    def _device_pixel_ratio(self) -> float:
        screen = QGuiApplication.primaryScreen()
        return screen.devicePixelRatio() if screen is not None else 1.0

    # --- Built-in controls ---

    def _build_controls(self) -> None:
        self.controls = QWidget(self)
        self.controls.setObjectName("geofenceControls")
        column = QVBoxLayout(self.controls)
        column.setContentsMargins(0, 0, 0, 0)
        column.setSpacing(CONTROLS_MARGIN)

        color = self.config.marker_color
        self.map_type_button = MapControlButton(parent=self.controls, background=color)
        self.edit_button = MapControlButton(parent=self.controls, background=color)
        self.undo_button = MapControlButton(
            "↶", "Undo last vertex", self.controls, background=color
        )
        self.delete_button = MapControlButton(
            "🗑", "Clear polygon", self.controls, background=DELETE_BUTTON_COLOR
        )

        self.map_type_button.clicked.connect(self.toggle_map_type)
        self.edit_button.clicked.connect(self.toggle_edit_mode)
        self.undo_button.clicked.connect(self.delete_last_vertex)
        self.delete_button.clicked.connect(self.clear_polygon)

        for button in (
            self.map_type_button,
            self.edit_button,
            self.undo_button,
            self.delete_button,
        ):
            column.addWidget(button)

    def _update_controls(self) -> None:
        if self.controls is None:
            return

        mode = self.state.display_mode
        if mode is MapDisplayMode.NORMAL:
            self.map_type_button.set_glyph("🛰", "Satellite view")
        elif mode is MapDisplayMode.SATELLITE:
            self.map_type_button.set_glyph("🗺", "Map view")
        else:
            raise ValueError(f"Unknown display mode: {mode!r}")

        edit_mode = self.state.edit_mode
        if edit_mode is MapEditMode.VIEW:
            self.edit_button.set_glyph("✎", "Edit polygon")
            editing = False
        elif edit_mode is MapEditMode.EDIT:
            self.edit_button.set_glyph("✓", "Finish editing")
            editing = True
        else:
            raise ValueError(f"Unknown edit mode: {edit_mode!r}")

        show_vertex_actions = editing and len(self.state) > 0
        self.undo_button.setVisible(show_vertex_actions)
        self.delete_button.setVisible(show_vertex_actions)
        self._position_controls()

    def _position_controls(self) -> None:
        if self.controls is None:
            return
        self.controls.adjustSize()
        self.controls.move(
            self.width() - self.controls.width() - CONTROLS_MARGIN, CONTROLS_MARGIN
        )
        self.controls.raise_()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._position_controls()

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self._position_controls()

    def _exclusion_zone(self) -> Optional[ControlExclusionZone]:
        """
        Returns the area where taps belong to the controls.

        Uses the rendered control stack when it has a geometry and the
        fixed default footprint before that.
        """
        if self.controls is None:
            return None
        geometry = self.controls.geometry()
        if not self.controls.isVisible() or geometry.isEmpty():
            return self._fixed_zone

        top_left = geometry.topLeft()
        bottom_right = geometry.bottomRight()
        if isinstance(self.surface, GeofenceMapView):
            viewport = self.surface.viewport()
            top_left = viewport.mapFrom(self, top_left)
            bottom_right = viewport.mapFrom(self, bottom_right)

        return ControlExclusionZone.from_controls_rect(
            self.surface.viewport_width(), top_left.x(), bottom_right.y()
        )

    # --- Surface events ---

    def _on_map_created(self) -> None:
        if self._map_ready:
            return
        self._map_ready = True
        self._remove_pois()

        pending, self._pending_taps = self._pending_taps, []
        for handler in pending:
            handler(self.surface)

    def _remove_pois(self) -> None:
        if not self.surface.set_map_style(poi_suppression_style_json()):
            logger.warning("Could not hide points of interest, keeping default style")

    def _on_map_tapped(self, latitude: float, longitude: float) -> None:
        if self.state.edit_mode is not MapEditMode.EDIT:
            return
        position = LatLng(latitude, longitude)
        if self._map_ready:
            self._place_vertex(self.surface, position)
        else:
            self._pending_taps.append(
                lambda surface: self._place_vertex(surface, position)
            )

    def _place_vertex(self, surface: MapSurface, position: LatLng) -> None:
        screen = surface.to_screen_coordinate(position)
        zone = self._exclusion_zone()
        if zone is not None and zone.contains(screen, surface.viewport_width()):
            logger.debug(f"Tap at {screen} is over the controls, ignored")
            return
        self.state.add_vertex(position)

    def _on_marker_drag_started(self, handle_id: str) -> None:
        index = index_from_handle_id(handle_id)
        if index is not None:
            self.state.begin_drag(index)

    def _on_marker_drag_ended(
        self, handle_id: str, latitude: float, longitude: float
    ) -> None:
        index = index_from_handle_id(handle_id)
        if index is None:
            logger.debug(f"Ignoring drag of unknown marker {handle_id}")
            return
        self.state.move_vertex(index, LatLng(latitude, longitude))


InteractiveMapGeofenceController.register(InteractiveMapGeofence)
