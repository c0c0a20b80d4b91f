"""
Vertex Handle Item Module.

Provides the VertexHandleItem class, the draggable marker drawn on each
polygon vertex while the editor is in edit mode.
"""

import logging
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QCursor, QPainter, QPixmap
from PySide6.QtWidgets import (
    QGraphicsItem,
    QGraphicsObject,
    QGraphicsSceneMouseEvent,
    QStyleOptionGraphicsItem,
    QWidget,
)

logger = logging.getLogger(__name__)


class VertexHandleItem(QGraphicsObject):
    """
    Draggable vertex marker rendered with a shared glyph pixmap.

    The item ignores view transformations so the glyph keeps its size at
    every zoom level. Positions are reported in scene coordinates; the view
    converts them to LatLng.

    Signals:
        drag_started: Emitted on mouse press. Args: (handle_id: str)
        drag_finished: Emitted on mouse release after a press.
                       Args: (handle_id: str, scene_x: float, scene_y: float)
    """

    drag_started = Signal(str)
    drag_finished = Signal(str, float, float)

    def __init__(
        self,
        handle_id: str,
        pixmap: QPixmap,
        anchor: tuple = (0.5, 0.5),
        parent: Optional[QGraphicsItem] = None,
    ) -> None:
        """
        Initializes a VertexHandleItem.

        Args:
            handle_id: Id of the vertex handle this item draws.
            pixmap: Glyph to draw, its device pixel ratio already set.
            anchor: Fraction of the glyph placed on the vertex.
            parent: Optional parent item.
        """
        super().__init__(parent)

        self.handle_id = handle_id
        self._pixmap = pixmap
        self._anchor = anchor
        self._is_dragging = False

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsMovable, True)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemSendsGeometryChanges, True)
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)

        self.setCursor(QCursor(Qt.CursorShape.SizeAllCursor))

        # Above the polygon
        self.setZValue(10)

    def set_pixmap(self, pixmap: QPixmap) -> None:
        """Replaces the glyph."""
        self.prepareGeometryChange()
        self._pixmap = pixmap
        self.update()

    def _logical_size(self) -> QRectF:
        ratio = self._pixmap.devicePixelRatio() or 1.0
        width = self._pixmap.width() / ratio
        height = self._pixmap.height() / ratio
        return QRectF(
            -width * self._anchor[0], -height * self._anchor[1], width, height
        )

    def boundingRect(self) -> QRectF:
        """
        Returns the bounding rectangle of the glyph around the anchor.

        Returns:
            QRectF: The glyph rectangle in item coordinates.
        """
        return self._logical_size()

    def paint(
        self,
        painter: QPainter,
        option: QStyleOptionGraphicsItem,
        widget: Optional[QWidget] = None,
    ) -> None:
        """Draws the glyph pixmap."""
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.drawPixmap(self.boundingRect().topLeft(), self._pixmap)

    @property
    def is_dragging(self) -> bool:
        return self._is_dragging

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        """Track drag start."""
        if event.button() == Qt.MouseButton.LeftButton:
            self._is_dragging = True
            logger.debug(f"Handle {self.handle_id} drag started at {self.pos()}")
            self.drag_started.emit(self.handle_id)
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent) -> None:
        """Emit the final position on drag end."""
        super().mouseReleaseEvent(event)
        if event.button() == Qt.MouseButton.LeftButton and self._is_dragging:
            self._is_dragging = False
            scene_pos: QPointF = self.scenePos()
            logger.debug(f"Handle {self.handle_id} drag ended at {scene_pos}")
            self.drag_finished.emit(self.handle_id, scene_pos.x(), scene_pos.y())
