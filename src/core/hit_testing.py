"""
Tap Hit-Testing Module.

Decides whether a tap landed on the built-in control buttons rather than
on the map. Taps over the button stack must never place a vertex.
"""

from dataclasses import dataclass
from typing import NamedTuple

# Footprint of the four stacked control buttons, anchored top-right
DEFAULT_ZONE_WIDTH = 80
DEFAULT_ZONE_HEIGHT = 350
CONTROLS_MARGIN = 16


class ScreenCoordinate(NamedTuple):
    """A point in viewport pixels, origin top-left."""

    x: int
    y: int


@dataclass(frozen=True)
class ControlExclusionZone:
    """
    Rectangle anchored to the top-right corner of the map viewport.

    Attributes:
        width: Extent leftwards from the right edge, in pixels.
        height: Extent downwards from the top edge, in pixels.
    """

    width: int = DEFAULT_ZONE_WIDTH
    height: int = DEFAULT_ZONE_HEIGHT

    def contains(self, point: ScreenCoordinate, viewport_width: int) -> bool:
        """
        Checks whether a tap falls inside the zone.

        Args:
            point: Tap position in viewport pixels.
            viewport_width: Current width of the map viewport.

        Returns:
            bool: True if the tap is over the controls.
        """
        return point.x >= viewport_width - self.width and point.y <= self.height

    @classmethod
    def from_controls_rect(
        cls,
        viewport_width: int,
        left: int,
        bottom: int,
        margin: int = CONTROLS_MARGIN,
    ) -> "ControlExclusionZone":
        """
        Builds the zone from the rendered control stack geometry.

        Args:
            viewport_width: Width of the map viewport.
            left: Left edge of the control stack in viewport pixels.
            bottom: Bottom edge of the control stack in viewport pixels.
            margin: Extra padding around the stack.

        Returns:
            ControlExclusionZone: Zone covering the stack and its margin.
        """
        width = max(0, viewport_width - left + margin)
        height = max(0, bottom + margin)
        return cls(width=width, height=height)
