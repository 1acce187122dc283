import asyncio
from typing import List, Optional, Tuple

import pytest

from userlocation.geo import Coordinate
from userlocation.models import DirectionsRequest, Placemark, Route


async def settle(rounds: int = 5) -> None:
    """Let freshly created tasks run up to their first await."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class DeferredGeocodeProvider:
    """Geocoder whose lookups stay pending until the test resolves them."""

    def __init__(self):
        self.calls: List[Tuple[Coordinate, asyncio.Future]] = []

    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[Placemark]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((coordinate, future))
        return await future

    def resolve(self, index: int, placemark: Optional[Placemark]) -> None:
        self.calls[index][1].set_result(placemark)

    def fail(self, index: int, error: Exception) -> None:
        self.calls[index][1].set_exception(error)


class DeferredDirectionsProvider:
    """Directions provider whose computations stay pending until resolved."""

    def __init__(self):
        self.calls: List[Tuple[DirectionsRequest, asyncio.Future]] = []

    async def calculate(self, request: DirectionsRequest) -> List[Route]:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((request, future))
        return await future

    def resolve(self, index: int, routes: List[Route]) -> None:
        self.calls[index][1].set_result(routes)

    def fail(self, index: int, error: Exception) -> None:
        self.calls[index][1].set_exception(error)


class RecordingAddressSink:
    def __init__(self):
        self.addresses: List[str] = []
        self.errors: List[Exception] = []

    def publish_address(self, address: str) -> None:
        self.addresses.append(address)

    def publish_error(self, error: Exception) -> None:
        self.errors.append(error)


class RecordingOverlaySink:
    def __init__(self):
        self.routes: List[Route] = []
        self.clears = 0
        self.errors: List[Exception] = []

    def add_route(self, route: Route) -> None:
        self.routes.append(route)

    def clear_routes(self) -> None:
        self.clears += 1
        self.routes.clear()

    def publish_error(self, error: Exception) -> None:
        self.errors.append(error)


class RecordingAlerts:
    def __init__(self):
        self.alerts: List[Tuple[str, str]] = []

    def show_alert(self, title: str, message: str) -> None:
        self.alerts.append((title, message))


def make_route(*pairs: Tuple[float, float], name: str = "Route") -> Route:
    return Route(path=[Coordinate(lat, lon) for lat, lon in pairs], name=name)


@pytest.fixture
def geocoder():
    return DeferredGeocodeProvider()


@pytest.fixture
def directions():
    return DeferredDirectionsProvider()


@pytest.fixture
def address_sink():
    return RecordingAddressSink()


@pytest.fixture
def overlay_sink():
    return RecordingOverlaySink()


@pytest.fixture
def alerts():
    return RecordingAlerts()
