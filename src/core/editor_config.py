"""
Geofence Editor Configuration Module.

Construction-time options of the geofence editor widget. Values are fixed
for the lifetime of a widget; the controller interface is the only runtime
path for changing modes.
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from PIL import ImageColor

from src.core.map_math import clamp_zoom
from src.core.maps import LatLng
from src.core.overlay import OverlayStyle

logger = logging.getLogger(__name__)

ENV_PREFIX = "GEOFENCE_"
DEFAULT_POSITION = LatLng(51.5074, -0.1278)
DEFAULT_MARKER_COLOR = "#2196F3"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class GeofenceEditorConfig:
    """
    Options of a geofence editor instance.

    Attributes:
        initial_position: Camera centre when the map opens.
        initial_zoom: Camera zoom when the map opens, clamped into the bounds.
        initial_points: Vertices shown immediately, copied into the editor.
        marker_color: Colour of handles, polygon stroke and fill.
        polygon_opacity: Fill alpha in [0.0, 1.0].
        stroke_width: Polygon stroke width in logical pixels.
        enable_tilt: Allow tilt gestures.
        enable_rotate: Allow rotate gestures.
        enable_compass: Show the compass while the map is rotated.
        min_zoom: Lowest zoom level the camera may reach.
        max_zoom: Highest zoom level the camera may reach.
        show_controls: Show the built-in button stack.
        compact_markers: Use the small vertex handles sized for mouse input
            instead of touch.
    """

    initial_position: LatLng = DEFAULT_POSITION
    initial_zoom: float = 8.0
    initial_points: Optional[List[LatLng]] = None
    marker_color: str = DEFAULT_MARKER_COLOR
    polygon_opacity: float = 0.3
    stroke_width: int = 2
    enable_tilt: bool = True
    enable_rotate: bool = True
    enable_compass: bool = True
    min_zoom: float = 1.0
    max_zoom: float = 20.0
    show_controls: bool = True
    compact_markers: bool = False

    def __post_init__(self):
        """Validates option ranges."""
        if self.min_zoom > self.max_zoom:
            raise ValueError(
                f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})"
            )
        if not 0.0 <= self.polygon_opacity <= 1.0:
            raise ValueError(
                f"polygon_opacity must be in [0.0, 1.0], got {self.polygon_opacity}"
            )
        if self.stroke_width < 0:
            raise ValueError(f"stroke_width must not be negative, got {self.stroke_width}")
        try:
            ImageColor.getrgb(self.marker_color)
        except ValueError as e:
            raise ValueError(f"Invalid marker_color '{self.marker_color}'") from e

        clamped = clamp_zoom(self.initial_zoom, self.min_zoom, self.max_zoom)
        if clamped != self.initial_zoom:
            logger.debug(f"Clamped initial zoom {self.initial_zoom} to {clamped}")
            self.initial_zoom = clamped

        if self.initial_points is not None:
            self.initial_points = list(self.initial_points)

    @property
    def overlay_style(self) -> OverlayStyle:
        """Polygon styling derived from the options."""
        return OverlayStyle(
            color=self.marker_color,
            fill_opacity=self.polygon_opacity,
            stroke_width=self.stroke_width,
        )

    def with_overrides(self, **changes: Any) -> "GeofenceEditorConfig":
        """
        Returns a copy with the given options replaced.

        None values are ignored so optional CLI arguments can be passed
        straight through.
        """
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "GeofenceEditorConfig":
        """
        Builds a configuration from GEOFENCE_* environment variables.

        Unset variables keep their defaults.

        Args:
            environ: Mapping to read, defaults to os.environ.

        Returns:
            GeofenceEditorConfig: The configuration.

        Raises:
            ValueError: If a variable holds a malformed value.
        """
        env = os.environ if environ is None else environ
        options: Dict[str, Any] = {}

        center = _read(env, "CENTER")
        if center is not None:
            options["initial_position"] = parse_latlng(center, f"{ENV_PREFIX}CENTER")

        for name, key in (
            ("ZOOM", "initial_zoom"),
            ("POLYGON_OPACITY", "polygon_opacity"),
            ("MIN_ZOOM", "min_zoom"),
            ("MAX_ZOOM", "max_zoom"),
        ):
            value = _read(env, name)
            if value is not None:
                options[key] = _parse_float(value, f"{ENV_PREFIX}{name}")

        stroke = _read(env, "STROKE_WIDTH")
        if stroke is not None:
            try:
                options["stroke_width"] = int(stroke)
            except ValueError as e:
                raise ValueError(
                    f"{ENV_PREFIX}STROKE_WIDTH must be an integer, got '{stroke}'"
                ) from e

        color = _read(env, "MARKER_COLOR")
        if color is not None:
            options["marker_color"] = color

        for name, key in (
            ("SHOW_CONTROLS", "show_controls"),
            ("ENABLE_TILT", "enable_tilt"),
            ("ENABLE_ROTATE", "enable_rotate"),
            ("ENABLE_COMPASS", "enable_compass"),
            ("COMPACT_MARKERS", "compact_markers"),
        ):
            value = _read(env, name)
            if value is not None:
                options[key] = _parse_bool(value, f"{ENV_PREFIX}{name}")

        logger.debug(f"Configuration from environment: {sorted(options)}")
        return cls(**options)


def parse_latlng(text: str, source: str = "coordinate") -> LatLng:
    """
    Parses "lat,lng" text.

    Args:
        text: Two comma separated numbers.
        source: Name used in error messages.

    Returns:
        LatLng: The parsed coordinate.

    Raises:
        ValueError: If the text is not two numbers.
    """
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise ValueError(f"{source} must be 'lat,lng', got '{text}'")
    return LatLng(_parse_float(parts[0], source), _parse_float(parts[1], source))


def _read(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(f"{ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_float(value: str, source: str) -> float:
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{source} must be a number, got '{value}'") from e


def _parse_bool(value: str, source: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{source} must be a boolean, got '{value}'")
