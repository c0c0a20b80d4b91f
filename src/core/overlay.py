"""
Geofence Overlay Module.

Derives what the map surface should draw from the editor state: the
polygon region and, in edit mode, one drag handle per vertex.

The overlay is rebuilt from scratch on every change. Geofence vertex
counts are bounded by what a person draws by hand, so a full rebuild is
always cheap.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from src.core.maps import LatLng

GEOFENCE_POLYGON_ID = "geofence"
MIN_POLYGON_POINTS = 3


class MapEditMode(Enum):
    """Interaction state of the editor."""

    VIEW = "view"
    EDIT = "edit"


class MapDisplayMode(Enum):
    """Basemap display style."""

    NORMAL = "normal"
    SATELLITE = "satellite"


@dataclass(frozen=True)
class OverlayStyle:
    """
    Visual options applied to the derived polygon.

    Attributes:
        color: Stroke colour, also used for the fill.
        fill_opacity: Fill alpha in [0.0, 1.0].
        stroke_width: Stroke width in logical pixels.
    """

    color: str = "#2196F3"
    fill_opacity: float = 0.3
    stroke_width: int = 2


@dataclass(frozen=True)
class PolygonOverlay:
    """A filled, stroked polygon region to draw on the map."""

    polygon_id: str
    points: Tuple[LatLng, ...]
    stroke_width: int
    stroke_color: str
    fill_color: str
    fill_opacity: float
    geodesic: bool = True


@dataclass(frozen=True)
class VertexHandle:
    """
    A draggable marker sitting exactly on one vertex.

    Attributes:
        handle_id: Stable id derived from the vertex index.
        index: Position of the vertex in the vertex list.
        position: Coordinate of the vertex.
        draggable: Handles can always be dragged.
        anchor: Icon anchor, (0.5, 0.5) centres the glyph on the vertex.
    """

    handle_id: str
    index: int
    position: LatLng
    draggable: bool = True
    anchor: Tuple[float, float] = (0.5, 0.5)


@dataclass(frozen=True)
class MapOverlay:
    """Everything the map surface draws on top of the basemap."""

    polygons: Tuple[PolygonOverlay, ...] = field(default_factory=tuple)
    handles: Tuple[VertexHandle, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.polygons and not self.handles


def handle_id_for(index: int) -> str:
    """Returns the handle id used for the vertex at ``index``."""
    return f"vertex_{index}"


def index_from_handle_id(handle_id: str) -> Optional[int]:
    """
    Parses a handle id back into a vertex index.

    Args:
        handle_id: Id in the form produced by handle_id_for().

    Returns:
        Optional[int]: The vertex index, or None for foreign ids.
    """
    prefix, _, suffix = handle_id.partition("_")
    if prefix != "vertex" or not suffix.isdigit():
        return None
    return int(suffix)


def derive_overlay(
    points: Sequence[LatLng], edit_mode: MapEditMode, style: OverlayStyle
) -> MapOverlay:
    """
    Builds the overlay for the given vertices and mode.

    The polygon is present only with at least three vertices. Handles are
    present one per vertex, and only in edit mode.

    Args:
        points: Ordered boundary vertices.
        edit_mode: Current edit mode.
        style: Polygon styling.

    Returns:
        MapOverlay: The derived overlay.

    Raises:
        ValueError: If edit_mode is not a MapEditMode member.
    """
    polygons: Tuple[PolygonOverlay, ...] = ()
    if len(points) >= MIN_POLYGON_POINTS:
        polygons = (
            PolygonOverlay(
                polygon_id=GEOFENCE_POLYGON_ID,
                points=tuple(points),
                stroke_width=style.stroke_width,
                stroke_color=style.color,
                fill_color=style.color,
                fill_opacity=style.fill_opacity,
                geodesic=True,
            ),
        )

    if edit_mode is MapEditMode.EDIT:
        handles = tuple(
            VertexHandle(handle_id=handle_id_for(i), index=i, position=point)
            for i, point in enumerate(points)
        )
    elif edit_mode is MapEditMode.VIEW:
        handles = ()
    else:
        raise ValueError(f"Unknown edit mode: {edit_mode!r}")

    return MapOverlay(polygons=polygons, handles=handles)


def toggled_edit_mode(mode: MapEditMode) -> MapEditMode:
    """Returns the other edit mode."""
    if mode is MapEditMode.VIEW:
        return MapEditMode.EDIT
    elif mode is MapEditMode.EDIT:
        return MapEditMode.VIEW
    raise ValueError(f"Unknown edit mode: {mode!r}")


def toggled_display_mode(mode: MapDisplayMode) -> MapDisplayMode:
    """Returns the other display mode."""
    if mode is MapDisplayMode.NORMAL:
        return MapDisplayMode.SATELLITE
    elif mode is MapDisplayMode.SATELLITE:
        return MapDisplayMode.NORMAL
    raise ValueError(f"Unknown display mode: {mode!r}")
