import pytest

from userlocation.geo import Coordinate
from userlocation.models import DirectionsRequest, Placemark
from userlocation.providers.fake_providers import FakeDirectionsProvider, FakeGeocodeProvider
from userlocation.providers.real_providers import MapboxDirectionsProvider, MapboxGeocodeProvider
from userlocation.providers.registry import get_providers, reload_providers


@pytest.fixture(autouse=True)
def _demo_mode(monkeypatch):
    monkeypatch.setenv("USERLOCATION_MODE", "demo")
    reload_providers()
    yield
    reload_providers("prod")


def test_demo_mode_uses_fakes():
    providers = get_providers()
    assert isinstance(providers.geocode, FakeGeocodeProvider)
    assert isinstance(providers.directions, FakeDirectionsProvider)


def test_registry_caches_provider_set():
    assert get_providers() is get_providers()


@pytest.mark.asyncio
async def test_reverse_geocode_deterministic():
    providers = get_providers()
    first = await providers.geocode.reverse_geocode(Coordinate(37.3318, -122.0312))
    second = await providers.geocode.reverse_geocode(Coordinate(37.33181, -122.03119))
    assert first == second
    assert first == Placemark(
        sub_thoroughfare="1",
        thoroughfare="Infinite Loop",
        locality="Cupertino",
        administrative_area="CA",
    )


@pytest.mark.asyncio
async def test_reverse_geocode_unknown_point_returns_none():
    providers = get_providers()
    assert await providers.geocode.reverse_geocode(Coordinate(-45.0, 170.0)) is None


@pytest.mark.asyncio
async def test_directions_fixture_with_alternates():
    providers = get_providers()
    request = DirectionsRequest(Coordinate(38.5, -120.2), Coordinate(43.252, -126.453))
    routes = await providers.directions.calculate(request)

    assert [r.name for r in routes] == ["Coast Highway", "Inland Route"]
    assert routes[0].path[0] == Coordinate(38.5, -120.2)
    assert routes[0].path[-1] == Coordinate(43.252, -126.453)
    assert routes[1].bounding_rect.max_lat == pytest.approx(40.7)


@pytest.mark.asyncio
async def test_directions_without_alternates_returns_one():
    providers = get_providers()
    request = DirectionsRequest(
        Coordinate(38.5, -120.2),
        Coordinate(43.252, -126.453),
        requests_alternate_routes=False,
    )
    routes = await providers.directions.calculate(request)
    assert len(routes) == 1


def test_prod_mode_switch(monkeypatch):
    monkeypatch.setenv("USERLOCATION_MODE", "prod")
    reload_providers()
    providers = get_providers()
    assert isinstance(providers.geocode, MapboxGeocodeProvider)
    assert isinstance(providers.directions, MapboxDirectionsProvider)
