"""
Vertex Marker Glyph Module.

Synthesizes the raster icon used for vertex drag handles: a translucent
disk with a solid ring, centred in a larger transparent square that acts as
the touch target. Map surfaces take marker icons as encoded images, so the
glyph is produced once as PNG bytes and shared by every handle.
"""

import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageColor, ImageDraw

logger = logging.getLogger(__name__)

# Logical pixel sizes
VISUAL_SIZE = 48.0
TOUCH_SIZE = 96.0
COMPACT_VISUAL_SIZE = 16.0
COMPACT_TOUCH_SIZE = 24.0
RING_WIDTH = 2.0
FILL_OPACITY = 0.3


@dataclass(frozen=True)
class VertexMarkerGlyph:
    """
    An encoded marker icon.

    Attributes:
        png_bytes: PNG encoded RGBA image.
        pixel_size: Edge length of the square image in physical pixels.
        device_pixel_ratio: Ratio the image was rendered for.
    """

    png_bytes: bytes
    pixel_size: int
    device_pixel_ratio: float

    @property
    def logical_size(self) -> float:
        """Edge length in logical pixels."""
        return self.pixel_size / self.device_pixel_ratio


def create_vertex_marker_glyph(
    color: str, device_pixel_ratio: float = 1.0, compact: bool = False
) -> VertexMarkerGlyph:
    """
    Renders the vertex handle icon.

    Args:
        color: Marker colour, any format Pillow understands (e.g. '#2196F3').
        device_pixel_ratio: Physical pixels per logical pixel of the display.
        compact: Use the small sizing meant for pointer-driven displays.

    Returns:
        VertexMarkerGlyph: The encoded icon.

    Raises:
        ValueError: If the colour cannot be parsed or the ratio is not positive.
    """
    if device_pixel_ratio <= 0:
        raise ValueError(f"Device pixel ratio must be positive, got {device_pixel_ratio}")

    visual_size = COMPACT_VISUAL_SIZE if compact else VISUAL_SIZE
    touch_size = COMPACT_TOUCH_SIZE if compact else TOUCH_SIZE

    red, green, blue = ImageColor.getrgb(color)[:3]

    pixel_size = int(touch_size * device_pixel_ratio)
    radius = visual_size * device_pixel_ratio / 2
    ring_width = max(1, round(RING_WIDTH * device_pixel_ratio))
    center = pixel_size / 2

    image = Image.new("RGBA", (pixel_size, pixel_size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    bbox = (center - radius, center - radius, center + radius, center + radius)
    draw.ellipse(
        bbox,
        fill=(red, green, blue, round(255 * FILL_OPACITY)),
        outline=(red, green, blue, 255),
        width=ring_width,
    )

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")

    logger.debug(
        f"Created vertex glyph {pixel_size}px at ratio {device_pixel_ratio} "
        f"for color {color}"
    )
    return VertexMarkerGlyph(
        png_bytes=buffer.getvalue(),
        pixel_size=pixel_size,
        device_pixel_ratio=device_pixel_ratio,
    )
