"""
Geographic value types and distance helpers.

Coordinates are (latitude, longitude) in decimal degrees. Distances are
great-circle meters on a spherical Earth of mean radius 6 371 000 m, within
about 0.5% of the ellipsoid. A move of exactly the geocode threshold counts
as "not moved".
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

EARTH_RADIUS_METERS = 6371000.0


@dataclass(frozen=True)
class Coordinate:
    """A point on the map."""
    latitude: float
    longitude: float

    @classmethod
    def from_pair(cls, pair: Tuple[float, float]) -> "Coordinate":
        """Build from a (lat, lon) tuple, as returned by polyline.decode()."""
        return cls(latitude=float(pair[0]), longitude=float(pair[1]))

    def distance_to(self, other: "Coordinate") -> float:
        return haversine_meters(
            self.latitude, self.longitude, other.latitude, other.longitude
        )


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine great-circle distance in meters between two lat/lon points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    # Clamp against rounding just above 1 for near-antipodal points
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


@dataclass(frozen=True)
class BoundingRect:
    """Smallest axis-aligned rectangle containing a set of coordinates."""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @classmethod
    def around(cls, coords: Sequence[Coordinate]) -> "BoundingRect":
        """
        Build the rectangle enclosing coords.

        Raises:
            ValueError: If coords is empty
        """
        if not coords:
            raise ValueError("coords cannot be empty")
        lats = [c.latitude for c in coords]
        lons = [c.longitude for c in coords]
        return cls(min(lats), min(lons), max(lats), max(lons))

    @staticmethod
    def union(rects: Iterable["BoundingRect"]) -> "BoundingRect":
        """
        Combine rectangles into one enclosing all of them.

        Raises:
            ValueError: If rects is empty
        """
        rects = list(rects)
        if not rects:
            raise ValueError("rects cannot be empty")
        return BoundingRect(
            min_lat=min(r.min_lat for r in rects),
            min_lon=min(r.min_lon for r in rects),
            max_lat=max(r.max_lat for r in rects),
            max_lon=max(r.max_lon for r in rects),
        )

    @property
    def center(self) -> Coordinate:
        return Coordinate(
            (self.min_lat + self.max_lat) / 2.0,
            (self.min_lon + self.max_lon) / 2.0,
        )

    def contains(self, coord: Coordinate) -> bool:
        return (
            self.min_lat <= coord.latitude <= self.max_lat
            and self.min_lon <= coord.longitude <= self.max_lon
        )


def decode_path(pairs: Iterable[Tuple[float, float]]) -> List[Coordinate]:
    """Convert (lat, lon) pairs into Coordinates."""
    return [Coordinate.from_pair(p) for p in pairs]
