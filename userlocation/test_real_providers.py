"""
Tests for the Mapbox providers against a mocked HTTP transport.
"""

import httpx
import pytest

from userlocation.common.errors import GeocodeFailed, RouteComputationFailed
from userlocation.geo import Coordinate
from userlocation.models import DirectionsRequest, Placemark
from userlocation.providers.real_providers import MapboxDirectionsProvider, MapboxGeocodeProvider

GEOCODE_RESPONSE = {
    "features": [
        {
            "text": "Infinite Loop",
            "address": "1",
            "context": [
                {"id": "place.123", "text": "Cupertino"},
                {"id": "region.456", "text": "California", "short_code": "US-CA"},
            ],
        }
    ]
}

DIRECTIONS_RESPONSE = {
    "code": "Ok",
    "routes": [
        {
            "geometry": "_p~iF~ps|U_ulLnnqC_mqNvxq`@",
            "distance": 786000.0,
            "duration": 30600.0,
            "legs": [{"summary": "US-101 N"}],
        },
        {
            "geometry": "_p~iF~ps|U_ulLnnqC",
            "distance": 250000.0,
            "duration": 9900.0,
            "legs": [{"summary": ""}],
        },
    ],
}


def _transport(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


class TestMapboxGeocodeProvider:

    @pytest.mark.asyncio
    async def test_maps_feature_to_placemark(self):
        seen = []
        provider = MapboxGeocodeProvider("tok", transport=_transport(GEOCODE_RESPONSE, seen=seen))
        placemark = await provider.reverse_geocode(Coordinate(37.3318, -122.0312))

        assert placemark == Placemark("1", "Infinite Loop", "Cupertino", "CA")
        # Mapbox wants lon,lat
        assert "/-122.0312,37.3318.json" in seen[0].url.path
        assert seen[0].url.params["types"] == "address"
        assert seen[0].url.params["access_token"] == "tok"

    @pytest.mark.asyncio
    async def test_no_features_returns_none(self):
        provider = MapboxGeocodeProvider("tok", transport=_transport({"features": []}))
        assert await provider.reverse_geocode(Coordinate(0, 0)) is None

    @pytest.mark.asyncio
    async def test_http_error_raises_geocode_failed(self):
        provider = MapboxGeocodeProvider("tok", transport=_transport({"message": "Too Many Requests"}, 429))
        with pytest.raises(GeocodeFailed):
            await provider.reverse_geocode(Coordinate(0, 0))


class TestMapboxDirectionsProvider:

    @pytest.mark.asyncio
    async def test_decodes_all_alternates(self):
        seen = []
        provider = MapboxDirectionsProvider("tok", transport=_transport(DIRECTIONS_RESPONSE, seen=seen))
        request = DirectionsRequest(Coordinate(38.5, -120.2), Coordinate(43.252, -126.453))
        routes = await provider.calculate(request)

        assert len(routes) == 2
        assert routes[0].name == "US-101 N"
        assert routes[1].name is None
        assert routes[0].path[1] == Coordinate(40.7, -120.95)
        assert "/driving/-120.2,38.5;-126.453,43.252" in seen[0].url.path
        assert seen[0].url.params["alternatives"] == "true"
        assert seen[0].url.params["geometries"] == "polyline"

    @pytest.mark.asyncio
    async def test_no_route_code_raises(self):
        provider = MapboxDirectionsProvider("tok", transport=_transport({"code": "NoRoute", "routes": []}))
        request = DirectionsRequest(Coordinate(0, 0), Coordinate(0, 1))
        with pytest.raises(RouteComputationFailed, match="NoRoute"):
            await provider.calculate(request)

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        provider = MapboxDirectionsProvider("tok", transport=_transport({}, 500))
        request = DirectionsRequest(Coordinate(0, 0), Coordinate(0, 1))
        with pytest.raises(RouteComputationFailed):
            await provider.calculate(request)
