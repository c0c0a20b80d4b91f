"""
Map Graphics View Module.

Provides the GeofenceMapView class, the map surface the geofence editor
draws on. It renders a plain Web Mercator basemap (land, ocean and a
graticule), polygon overlays and draggable vertex handles, and reports taps
and handle drags back as geographic coordinates.
"""

import logging
from typing import Dict, Optional, Sequence

from PySide6.QtCore import QLineF, QPoint, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import (
    QColor,
    QMouseEvent,
    QPainter,
    QPen,
    QPixmap,
    QShowEvent,
    QTransform,
    QWheelEvent,
)
from PySide6.QtWidgets import QGraphicsItem, QGraphicsScene, QGraphicsView, QWidget

from src.core.hit_testing import ScreenCoordinate
from src.core.map_math import clamp_zoom, latlng_to_world
from src.core.map_style import is_feature_visible, parse_map_style
from src.core.maps import LatLng
from src.core.marker_glyph import VertexMarkerGlyph
from src.core.overlay import MapDisplayMode, PolygonOverlay, VertexHandle
from src.gui.widgets.map.compass_painter import CompassPainter
from src.gui.widgets.map.coordinate_system import MapCoordinateSystem
from src.gui.widgets.map.polygon_item import GeofencePolygonItem
from src.gui.widgets.map.vertex_handle_item import VertexHandleItem

logger = logging.getLogger(__name__)

PALETTES = {
    MapDisplayMode.NORMAL: {
        "ocean": "#AADAFF",
        "land": "#F2EFE9",
        "graticule": "#C9C4BA",
    },
    MapDisplayMode.SATELLITE: {
        "ocean": "#0B2239",
        "land": "#2E3B24",
        "graticule": "#55624A",
    },
}


def palette_for(mode: MapDisplayMode) -> Dict[str, str]:
    """
    Returns the basemap colours for a display mode.

    Raises:
        ValueError: If mode is not a MapDisplayMode member.
    """
    if mode is MapDisplayMode.NORMAL:
        return PALETTES[MapDisplayMode.NORMAL]
    elif mode is MapDisplayMode.SATELLITE:
        return PALETTES[MapDisplayMode.SATELLITE]
    raise ValueError(f"Unknown display mode: {mode!r}")


class GeofenceMapView(QGraphicsView):
    """
    Graphics view implementing the MapSurface protocol.

    Scene coordinates are zoom-0 world pixels; the view transform scales
    them by 2^zoom and applies the map rotation.

    Signals:
        map_ready: Emitted once, the first time the view is shown.
        map_tapped: Emitted on a click on the map background.
                    Args: (latitude: float, longitude: float)
        marker_drag_started: Emitted when a handle drag begins.
                    Args: (handle_id: str)
        marker_drag_ended: Emitted when a handle is released.
                    Args: (handle_id: str, latitude: float, longitude: float)
    """

    map_ready = Signal()
    map_tapped = Signal(float, float)
    marker_drag_started = Signal(str)
    marker_drag_ended = Signal(str, float, float)

    TAP_THRESHOLD = 4  # Manhattan pixels between press and release
    ZOOM_STEP = 0.5
    ROTATE_STEP = 15.0

    def __init__(
        self,
        initial_position: LatLng = LatLng(51.5074, -0.1278),
        initial_zoom: float = 8.0,
        min_zoom: float = 1.0,
        max_zoom: float = 20.0,
        enable_rotate: bool = True,
        enable_tilt: bool = True,
        enable_compass: bool = True,
        parent: Optional[QWidget] = None,
    ) -> None:
        """
        Initializes the GeofenceMapView.

        Args:
            initial_position: Camera centre.
            initial_zoom: Camera zoom, clamped into [min_zoom, max_zoom].
            min_zoom: Lowest reachable zoom.
            max_zoom: Highest reachable zoom.
            enable_rotate: Allow Ctrl+wheel rotation.
            enable_tilt: Accepted for API parity; this surface is top-down.
            enable_compass: Paint the compass while rotated.
            parent: Parent widget.
        """
        super().__init__(parent)

        self.coord_system = MapCoordinateSystem()
        self.scene = QGraphicsScene(self)
        self.scene.setSceneRect(self.coord_system.scene_rect)
        self.setScene(self.scene)

        # View settings
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setFrameShape(QGraphicsView.Shape.NoFrame)

        # Camera
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.rotate_enabled = enable_rotate
        self.tilt_enabled = enable_tilt
        self.compass_enabled = enable_compass
        self._zoom = clamp_zoom(initial_zoom, min_zoom, max_zoom)
        self._rotation = 0.0
        self._initial_position = initial_position

        # Overlay items
        self.polygons: Dict[str, GeofencePolygonItem] = {}
        self.markers: Dict[str, VertexHandleItem] = {}
        self._glyph: Optional[VertexMarkerGlyph] = None
        self._glyph_pixmap = QPixmap()

        # Basemap
        self.display_mode = MapDisplayMode.NORMAL
        self._feature_visibility: Dict[str, bool] = {}
        self._compass = CompassPainter()

        # Tap tracking
        self._press_pos: Optional[QPoint] = None
        self._is_ready = False

        self._apply_camera(initial_position)

    # --- Camera ---

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def rotation(self) -> float:
        """Map rotation on screen, degrees clockwise."""
        return self._rotation

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    def camera_position(self) -> LatLng:
        """Returns the coordinate at the centre of the viewport."""
        center = self.mapToScene(self.viewport().rect().center())
        return self.coord_system.to_latlng(center)

    def set_camera(self, position: LatLng, zoom: Optional[float] = None) -> None:
        """
        Moves the camera.

        Args:
            position: New centre.
            zoom: New zoom, clamped; unchanged when None.
        """
        if zoom is not None:
            self._zoom = clamp_zoom(zoom, self.min_zoom, self.max_zoom)
        self._apply_camera(position)

    def set_rotation(self, degrees: float) -> None:
        """Rotates the map, keeping the current centre."""
        self._rotation = degrees % 360.0
        self._apply_camera(self.camera_position())

    def _apply_camera(self, center: LatLng) -> None:
        scale = 2.0**self._zoom
        transform = QTransform()
        transform.scale(scale, scale)
        transform.rotate(self._rotation)
        self.setTransform(transform)
        self.centerOn(self.coord_system.to_scene(center))
        logger.debug(
            f"Camera at {center}, zoom {self._zoom:.2f}, rotation {self._rotation:.0f}"
        )

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom on wheel; rotate on Ctrl+wheel when rotation is enabled."""
        direction = 1 if event.angleDelta().y() > 0 else -1
        center = self.camera_position()

        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if not self.rotate_enabled:
                return
            self._rotation = (self._rotation + direction * self.ROTATE_STEP) % 360.0
        else:
            self._zoom = clamp_zoom(
                self._zoom + direction * self.ZOOM_STEP, self.min_zoom, self.max_zoom
            )
        self._apply_camera(center)

    # --- Lifecycle ---

    def showEvent(self, event: QShowEvent) -> None:
        """Emit map_ready the first time the surface is shown."""
        super().showEvent(event)
        if not self._is_ready:
            self._is_ready = True
            self._apply_camera(self._initial_position)
            logger.info("Map surface ready")
            self.map_ready.emit()

    def viewport_width(self) -> int:
        """Returns the current viewport width in pixels."""
        return self.viewport().width()

    # --- Basemap ---

    def set_map_type(self, mode: MapDisplayMode) -> None:
        """
        Switches the basemap palette.

        Args:
            mode: Display mode to render.
        """
        palette_for(mode)
        self.display_mode = mode
        self.resetCachedContent()
        self.viewport().update()
        logger.debug(f"Map type set to {mode.value}")

    def set_map_style(self, style_json: str) -> bool:
        """
        Applies a style sheet to the basemap chrome.

        Args:
            style_json: Style rules in the Google Maps JSON format.

        Returns:
            bool: False if the style could not be parsed.
        """
        try:
            visibility = parse_map_style(style_json)
        except ValueError as e:
            logger.warning(f"Ignoring map style: {e}")
            return False

        self._feature_visibility = visibility
        self.viewport().update()
        logger.debug(f"Applied map style for features: {sorted(visibility)}")
        return True

    def is_feature_visible(self, feature_type: str) -> bool:
        """Returns whether a basemap feature type is drawn under the current style."""
        return is_feature_visible(self._feature_visibility, feature_type)

    def drawBackground(self, painter: QPainter, rect: QRectF) -> None:
        """Paints ocean, the world square and the graticule."""
        colors = palette_for(self.display_mode)
        painter.fillRect(rect, QColor(colors["ocean"]))

        world = self.coord_system.scene_rect
        painter.fillRect(world.intersected(rect), QColor(colors["land"]))

        pen = QPen(QColor(colors["graticule"]), 1)
        pen.setCosmetic(True)
        painter.setPen(pen)

        step = self._graticule_step()
        # Meridians are evenly spaced in Mercator
        for lng in range(-180, 181, step):
            x = world.left() + (lng + 180) / 360.0 * world.width()
            painter.drawLine(QLineF(x, world.top(), x, world.bottom()))

        for lat in range(-80, 81, step):
            _, y = latlng_to_world(LatLng(lat, 0.0))
            painter.drawLine(QLineF(world.left(), y, world.right(), y))

    def _graticule_step(self) -> int:
        if self._zoom < 3:
            return 30
        if self._zoom < 5:
            return 10
        if self._zoom < 7:
            return 5
        return 1

    def drawForeground(self, painter: QPainter, rect: QRectF) -> None:
        """Paint the compass while the map is rotated."""
        super().drawForeground(painter, rect)
        if not self.compass_enabled or self._rotation == 0.0:
            return
        painter.save()
        painter.resetTransform()
        self._compass.paint(painter, QRectF(self.viewport().rect()), self._rotation)
        painter.restore()

    # --- Overlays ---

    def set_polygons(self, polygons: Sequence[PolygonOverlay]) -> None:
        """
        Replaces every drawn polygon.

        Args:
            polygons: Polygons to draw; an empty sequence removes all.
        """
        wanted = {p.polygon_id: p for p in polygons}

        for polygon_id in list(self.polygons):
            if polygon_id not in wanted:
                self.scene.removeItem(self.polygons.pop(polygon_id))

        for polygon_id, overlay in wanted.items():
            item = self.polygons.get(polygon_id)
            if item is None:
                item = GeofencePolygonItem(overlay, self.coord_system)
                self.scene.addItem(item)
                self.polygons[polygon_id] = item
            else:
                item.update_overlay(overlay)

    def set_markers(
        self, handles: Sequence[VertexHandle], glyph: VertexMarkerGlyph
    ) -> None:
        """
        Replaces every drawn marker.

        Items are matched by handle id, so a handle being dragged survives
        the redraw that its own drag end triggers.

        Args:
            handles: Markers to draw; an empty sequence removes all.
            glyph: Icon shared by the markers.
        """
        if glyph is not self._glyph:
            self._glyph = glyph
            self._glyph_pixmap = self._decode_glyph(glyph)
            for item in self.markers.values():
                item.set_pixmap(self._glyph_pixmap)

        wanted = {h.handle_id: h for h in handles}

        for handle_id in list(self.markers):
            if handle_id not in wanted:
                self.scene.removeItem(self.markers.pop(handle_id))

        for handle_id, handle in wanted.items():
            item = self.markers.get(handle_id)
            if item is None:
                item = VertexHandleItem(handle_id, self._glyph_pixmap, handle.anchor)
                item.setFlag(
                    QGraphicsItem.GraphicsItemFlag.ItemIsMovable, handle.draggable
                )
                item.drag_started.connect(self.marker_drag_started.emit)
                item.drag_finished.connect(self._on_handle_drag_finished)
                self.scene.addItem(item)
                self.markers[handle_id] = item
            item.setPos(self.coord_system.to_scene(handle.position))

        logger.debug(f"Showing {len(self.markers)} vertex handles")

    def _decode_glyph(self, glyph: VertexMarkerGlyph) -> QPixmap:
        pixmap = QPixmap()
        if not pixmap.loadFromData(glyph.png_bytes, "PNG"):
            logger.error("Failed to decode vertex marker glyph")
            return pixmap
        pixmap.setDevicePixelRatio(glyph.device_pixel_ratio)
        return pixmap

    def _on_handle_drag_finished(
        self, handle_id: str, scene_x: float, scene_y: float
    ) -> None:
        position = self.coord_system.to_latlng(QPointF(scene_x, scene_y))
        self.marker_drag_ended.emit(handle_id, position.latitude, position.longitude)

    # --- Projection ---

    def to_screen_coordinate(self, position: LatLng) -> ScreenCoordinate:
        """
        Converts a coordinate to viewport pixels.

        Args:
            position: Geographic coordinate.

        Returns:
            ScreenCoordinate: Position in the viewport.
        """
        point = self.mapFromScene(self.coord_system.to_scene(position))
        return ScreenCoordinate(point.x(), point.y())

    # --- Mouse ---

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """
        Disable panning when pressing a handle so the handle drags instead.
        Background presses pan the map and may become taps.
        """
        pos = event.position().toPoint()
        item = self.itemAt(pos)

        if isinstance(item, VertexHandleItem):
            self.setDragMode(QGraphicsView.DragMode.NoDrag)
            self._press_pos = None
        else:
            self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
            if event.button() == Qt.MouseButton.LeftButton:
                self._press_pos = pos
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Emit map_tapped for a press and release that barely moved."""
        pos = event.position().toPoint()
        press_pos = self._press_pos
        self._press_pos = None

        super().mouseReleaseEvent(event)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)

        if press_pos is None or event.button() != Qt.MouseButton.LeftButton:
            return
        if (pos - press_pos).manhattanLength() > self.TAP_THRESHOLD:
            return

        scene_pos = self.mapToScene(pos)
        if not self.coord_system.scene_rect.contains(scene_pos):
            logger.debug(f"Tap at {pos} outside the world, ignored")
            return

        position = self.coord_system.to_latlng(scene_pos)
        logger.debug(f"Map tapped at {position}")
        self.map_tapped.emit(position.latitude, position.longitude)
