"""
Compass Painter Module.
Handles the rendering of a compass rose showing the map bearing.
"""

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QPolygonF


class CompassPainter:
    """
    Helper class to render a compass needle in a viewport corner.
    """

    SIZE = 40
    MARGIN = 16

    def __init__(self) -> None:
        self.brush_background = QBrush(QColor(255, 255, 255, 200))
        self.brush_north = QBrush(QColor("#E74C3C"))
        self.brush_south = QBrush(QColor("#7F8C8D"))
        self.pen_outline = QPen(QColor(0, 0, 0, 80), 1)

    def paint(self, painter: QPainter, viewport_rect: QRectF, bearing: float) -> None:
        """
        Draws the compass in the top-left corner of the viewport.

        Args:
            painter: The viewport painter.
            viewport_rect: Visible area of the view.
            bearing: Map rotation in degrees, clockwise.
        """
        radius = self.SIZE / 2
        center = QPointF(
            viewport_rect.left() + self.MARGIN + radius,
            viewport_rect.top() + self.MARGIN + radius,
        )

        painter.save()
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        painter.setPen(self.pen_outline)
        painter.setBrush(self.brush_background)
        painter.drawEllipse(center, radius, radius)

        painter.translate(center)
        # North points up when bearing is 0
        painter.rotate(bearing)

        needle = radius * 0.75
        width = radius * 0.25
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self.brush_north)
        painter.drawPolygon(
            QPolygonF([QPointF(0, -needle), QPointF(width, 0), QPointF(-width, 0)])
        )
        painter.setBrush(self.brush_south)
        painter.drawPolygon(
            QPolygonF([QPointF(0, needle), QPointF(width, 0), QPointF(-width, 0)])
        )

        painter.restore()
