"""
Standard Buttons Module.

Provides lightweight button wrappers with standardized properties for the
map overlay controls.
"""

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import QPushButton, QWidget


class MapControlButton(QPushButton):
    """
    A round, fixed-size floating button drawn over the map.

    Shows a single glyph character; the tooltip carries the action name.
    """

    DEFAULT_SIZE = 56

    def __init__(
        self,
        glyph: str = "",
        tooltip: str = "",
        parent: QWidget = None,
        size: int = DEFAULT_SIZE,
        background: str = "#2196F3",
    ) -> None:
        """
        Initializes a map control button.

        Args:
            glyph: The icon character.
            tooltip: Action name shown on hover.
            parent: The parent widget, if any.
            size: The fixed diameter in pixels.
            background: Button colour.
        """
        super().__init__(glyph, parent)
        self.setFixedSize(QSize(size, size))
        self.setToolTip(tooltip)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.set_background(background)

    def set_background(self, color: str) -> None:
        """Applies the round button style with the given colour."""
        radius = self.width() // 2
        pressed = QColor(color).darker(120).name()
        self.setStyleSheet(
            f"QPushButton {{ background-color: {color}; color: white; "
            f"border: none; border-radius: {radius}px; font-size: 20px; }}"
            f"QPushButton:pressed {{ background-color: {pressed}; }}"
        )

    def set_glyph(self, glyph: str, tooltip: str) -> None:
        """Changes the icon character and tooltip."""
        self.setText(glyph)
        self.setToolTip(tooltip)
