from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import polyline

from ..common.errors import RouteComputationFailed
from ..common.events import EventSource
from ..geo import BoundingRect, Coordinate, decode_path
from ..models import DirectionsRequest, PermissionState, Placemark, Route
from .contracts import (
    DirectionsProvider,
    GeocodeProvider,
    LocationManager,
    MapDisplay,
)

FIXTURES_ROOT = Path(__file__).parent.parent / "fixtures" / "demo"


class _FixtureLoader:
    def __init__(self, fixture_name: str):
        self.path = FIXTURES_ROOT / fixture_name / "data.json"
        with self.path.open("r", encoding="utf-8") as f:
            self.data = json.load(f)


class FakeGeocodeProvider(GeocodeProvider, _FixtureLoader):
    def __init__(self) -> None:
        _FixtureLoader.__init__(self, "geocode")
        self.calls: List[Coordinate] = []

    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[Placemark]:
        self.calls.append(coordinate)
        coord_key = f"{round(coordinate.latitude, 4)},{round(coordinate.longitude, 4)}"
        mapping = self.data.get("reverse", {})
        if coord_key in mapping:
            return Placemark(**mapping[coord_key])
        return None


class FakeDirectionsProvider(DirectionsProvider, _FixtureLoader):
    def __init__(self) -> None:
        _FixtureLoader.__init__(self, "directions")
        self.calls: List[DirectionsRequest] = []

    async def calculate(self, request: DirectionsRequest) -> List[Route]:
        self.calls.append(request)
        entries = self.data.get("routes", [])
        for entry in entries:
            if (
                round(request.source.latitude, 4) == round(entry["origin_lat"], 4)
                and round(request.destination.latitude, 4) == round(entry["dest_lat"], 4)
            ):
                return self._routes(entry, request)
        if entries:
            return self._routes(entries[0], request)
        raise RouteComputationFailed("No directions fixture available")

    @staticmethod
    def _routes(entry: Dict[str, Any], request: DirectionsRequest) -> List[Route]:
        alternates = entry.get("alternates", [])
        if not request.requests_alternate_routes:
            alternates = alternates[:1]
        return [
            Route(
                path=decode_path(polyline.decode(alt["geometry"])),
                geometry=alt["geometry"],
                distance_m=alt["distance_m"],
                duration_s=alt["duration_s"],
                name=alt.get("name"),
            )
            for alt in alternates
        ]


class FakeLocationManager(LocationManager):
    """In-memory location manager. Tests drive it with push_* methods."""

    def __init__(
        self,
        status: PermissionState = PermissionState.UNDETERMINED,
        services_enabled: bool = True,
        location: Optional[Coordinate] = None,
    ) -> None:
        self.authorization_changed: EventSource[PermissionState] = EventSource("authorization_changed")
        self.location_updated: EventSource[Coordinate] = EventSource("location_updated")
        self.desired_accuracy: Optional[float] = None
        self.services_enabled = services_enabled
        self.status = status
        self.updating = False
        self.authorization_requests = 0
        self._location = location

    @property
    def location(self) -> Optional[Coordinate]:
        return self._location

    def location_services_enabled(self) -> bool:
        return self.services_enabled

    def authorization_status(self) -> PermissionState:
        return self.status

    def request_when_in_use_authorization(self) -> None:
        self.authorization_requests += 1

    def start_updating_location(self) -> None:
        self.updating = True

    def stop_updating_location(self) -> None:
        self.updating = False

    def push_authorization(self, status: PermissionState) -> None:
        self.status = status
        self.authorization_changed.emit(status)

    def push_location(self, coordinate: Coordinate) -> None:
        self._location = coordinate
        if self.updating:
            self.location_updated.emit(coordinate)


class FakeMapDisplay(MapDisplay):
    """In-memory map view that records the commands it receives."""

    def __init__(self, center: Coordinate = Coordinate(0.0, 0.0)) -> None:
        self.region_changed: EventSource[Coordinate] = EventSource("region_changed")
        self.shows_user_location = False
        self.regions: List[tuple] = []
        self.visible_rects: List[BoundingRect] = []
        self.overlays: List[Route] = []
        self._center = center

    @property
    def center_coordinate(self) -> Coordinate:
        return self._center

    def set_region(
        self, center: Coordinate, latitudinal_meters: float, longitudinal_meters: float
    ) -> None:
        self.regions.append((center, latitudinal_meters, longitudinal_meters))
        self._center = center

    def set_visible_rect(self, rect: BoundingRect) -> None:
        self.visible_rects.append(rect)
        self._center = rect.center

    def add_overlay(self, route: Route) -> None:
        self.overlays.append(route)

    def remove_overlays(self) -> None:
        self.overlays.clear()

    def pan_to(self, center: Coordinate) -> None:
        """Simulate the user dragging the map."""
        self._center = center
        self.region_changed.emit(center)
