from __future__ import annotations

from typing import List, Optional, Protocol

from ..common.events import EventSource
from ..geo import BoundingRect, Coordinate
from ..models import DirectionsRequest, PermissionState, Placemark, Route


class GeocodeProvider(Protocol):
    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[Placemark]:
        ...


class DirectionsProvider(Protocol):
    async def calculate(self, request: DirectionsRequest) -> List[Route]:
        ...


class LocationManager(Protocol):
    authorization_changed: EventSource[PermissionState]
    location_updated: EventSource[Coordinate]
    desired_accuracy: Optional[float]

    @property
    def location(self) -> Optional[Coordinate]:
        ...

    def location_services_enabled(self) -> bool:
        ...

    def authorization_status(self) -> PermissionState:
        ...

    def request_when_in_use_authorization(self) -> None:
        ...

    def start_updating_location(self) -> None:
        ...

    def stop_updating_location(self) -> None:
        ...


class MapDisplay(Protocol):
    region_changed: EventSource[Coordinate]
    shows_user_location: bool

    @property
    def center_coordinate(self) -> Coordinate:
        ...

    def set_region(
        self, center: Coordinate, latitudinal_meters: float, longitudinal_meters: float
    ) -> None:
        ...

    def set_visible_rect(self, rect: BoundingRect) -> None:
        ...

    def add_overlay(self, route: Route) -> None:
        ...

    def remove_overlays(self) -> None:
        ...


class AddressSink(Protocol):
    def publish_address(self, address: str) -> None:
        ...

    def publish_error(self, error: Exception) -> None:
        ...


class OverlaySink(Protocol):
    def add_route(self, route: Route) -> None:
        ...

    def clear_routes(self) -> None:
        ...

    def publish_error(self, error: Exception) -> None:
        ...


class AlertPresenter(Protocol):
    def show_alert(self, title: str, message: str) -> None:
        ...
