"""
Domain models for the map screen controllers.

Permission states, request lifecycles, placemarks and routes.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .common.errors import InvalidTransition
from .geo import BoundingRect, Coordinate


class PermissionState(str, Enum):
    """Device location permission for this app."""
    UNDETERMINED = "undetermined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED_FOREGROUND = "authorized_foreground"
    AUTHORIZED_ALWAYS = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (PermissionState.AUTHORIZED_FOREGROUND, PermissionState.AUTHORIZED_ALWAYS)

    @property
    def is_blocked(self) -> bool:
        return self in (PermissionState.DENIED, PermissionState.RESTRICTED)


class RequestState(str, Enum):
    """Lifecycle shared by geocode and route requests."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SUPERSEDED = "superseded"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestState.PENDING


class TransportType(str, Enum):
    AUTOMOBILE = "automobile"
    WALKING = "walking"


class _Lifecycle:
    """Mixin enforcing PENDING -> terminal, with no way back out."""

    state: RequestState

    def _move_to(self, new_state: RequestState) -> None:
        if self.state.is_terminal:
            raise InvalidTransition(
                f"Cannot move {type(self).__name__} from {self.state.value} to {new_state.value}"
            )
        self.state = new_state

    def complete(self) -> None:
        self._move_to(RequestState.COMPLETED)

    def fail(self) -> None:
        self._move_to(RequestState.FAILED)

    @property
    def is_pending(self) -> bool:
        return self.state is RequestState.PENDING


@dataclass
class GeocodeRequest(_Lifecycle):
    """One reverse-geocode lookup issued by the throttle controller."""
    coordinate: Coordinate
    sequence: int
    state: RequestState = RequestState.PENDING

    def supersede(self) -> None:
        self._move_to(RequestState.SUPERSEDED)


@dataclass(frozen=True)
class DirectionsRequest:
    """What the directions provider is asked to compute."""
    source: Coordinate
    destination: Coordinate
    transport_type: TransportType = TransportType.AUTOMOBILE
    requests_alternate_routes: bool = True


@dataclass
class RouteRequest(_Lifecycle):
    """One directions computation issued by the route controller."""
    request_id: int
    source: Coordinate
    destination: Coordinate
    handle: Optional[asyncio.Task] = None
    state: RequestState = RequestState.PENDING

    def cancel(self) -> None:
        """Ask the in-flight computation to stop, then mark CANCELLED."""
        if self.handle is not None and not self.handle.done():
            self.handle.cancel()
        self._move_to(RequestState.CANCELLED)

    def to_directions_request(self) -> DirectionsRequest:
        return DirectionsRequest(
            source=self.source,
            destination=self.destination,
            transport_type=TransportType.AUTOMOBILE,
            requests_alternate_routes=True,
        )


@dataclass(frozen=True)
class Placemark:
    """Structured reverse-geocode result."""
    sub_thoroughfare: Optional[str] = None  # street number
    thoroughfare: Optional[str] = None  # street name
    locality: Optional[str] = None
    administrative_area: Optional[str] = None


def format_street_address(placemark: Placemark) -> str:
    """
    "<number> <street>" with missing parts left out.

    Examples:
        ("12", "Main St") -> "12 Main St"
        (None, "Elm St") -> "Elm St"
        (None, None) -> ""
    """
    street_number = placemark.sub_thoroughfare or ""
    street_name = placemark.thoroughfare or ""
    return " ".join(part for part in (street_number, street_name) if part)


@dataclass(frozen=True)
class Route:
    """One route returned by the directions provider."""
    path: List[Coordinate]
    geometry: str = ""  # encoded polyline as received
    distance_m: float = 0.0
    duration_s: float = 0.0
    name: Optional[str] = None
    bounding_rect: BoundingRect = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'bounding_rect', BoundingRect.around(self.path))
