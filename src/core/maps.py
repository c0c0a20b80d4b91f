"""Core Maps Module.

Defines the LatLng and GeofencePolygon dataclasses used by the geofence
editor.

The LatLng class is an immutable geographic coordinate:
- Latitude clamped to [-90, 90] degrees
- Longitude wrapped into [-180, 180) degrees

The GeofencePolygon class is a named snapshot of a drawn boundary:
- Ordered vertices, insertion order defines the boundary path
- GeoJSON export for handing the boundary to other systems
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple


@dataclass(frozen=True)
class LatLng:
    """
    A geographic coordinate in degrees.

    Attributes:
        latitude: Latitude in degrees, clamped to [-90, 90].
        longitude: Longitude in degrees, wrapped into [-180, 180).
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        """Normalizes the coordinate into its canonical range."""
        lat = max(-90.0, min(90.0, float(self.latitude)))
        lng = float(self.longitude)
        if not -180.0 <= lng < 180.0:
            lng = ((lng + 180.0) % 360.0) - 180.0
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lng)

    def to_dict(self) -> Dict[str, float]:
        """
        Converts the coordinate to a dictionary.

        Returns:
            Dict[str, float]: {"latitude": ..., "longitude": ...}
        """
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatLng":
        """
        Creates a LatLng from a dictionary.

        Args:
            data: Dictionary with "latitude" and "longitude" keys.

        Returns:
            LatLng: A new coordinate.
        """
        return cls(latitude=data["latitude"], longitude=data["longitude"])

    @classmethod
    def from_pair(cls, pair: Sequence[float]) -> "LatLng":
        """Creates a LatLng from a (latitude, longitude) pair."""
        lat, lng = pair
        return cls(lat, lng)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass
class GeofencePolygon:
    """
    A named snapshot of a geofence boundary.

    Attributes:
        id: Identifier of the polygon.
        points: Ordered boundary vertices.
    """

    id: str
    points: List[LatLng] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the polygon to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of the polygon.
        """
        return {
            "id": self.id,
            "points": [p.to_dict() for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeofencePolygon":
        """
        Creates a GeofencePolygon from a dictionary.

        Args:
            data: Dictionary produced by to_dict().

        Returns:
            GeofencePolygon: A new polygon.
        """
        return cls(
            id=data["id"],
            points=[LatLng.from_dict(p) for p in data.get("points", [])],
        )

    def to_geojson(self) -> Dict[str, Any]:
        """
        Converts the polygon to a GeoJSON Polygon geometry.

        The ring is closed and uses [longitude, latitude] ordering. Fewer
        than three points cannot form a ring, so the coordinates are empty.

        Returns:
            Dict[str, Any]: GeoJSON geometry object.
        """
        if len(self.points) < 3:
            return {"type": "Polygon", "coordinates": []}

        ring = [[p.longitude, p.latitude] for p in self.points]
        if ring[0] != ring[-1]:
            ring.append(list(ring[0]))
        return {"type": "Polygon", "coordinates": [ring]}
