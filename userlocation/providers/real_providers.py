from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import httpx
import polyline

from ..common.errors import GeocodeFailed, RouteComputationFailed
from ..geo import Coordinate, decode_path
from ..models import DirectionsRequest, Placemark, Route, TransportType
from .contracts import DirectionsProvider, GeocodeProvider

logger = logging.getLogger(__name__)

MAPBOX_ACCESS_TOKEN = os.environ.get("MAPBOX_ACCESS_TOKEN", "")
MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
MAPBOX_DIRECTIONS_URL = "https://api.mapbox.com/directions/v5/mapbox"

MAPBOX_PROFILES = {
    TransportType.AUTOMOBILE: "driving",
    TransportType.WALKING: "walking",
}


def _placemark_from_feature(feature: Dict[str, Any]) -> Placemark:
    locality = None
    area = None
    for ctx in feature.get("context", []):
        ctx_id = ctx.get("id", "")
        if ctx_id.startswith("place") and locality is None:
            locality = ctx.get("text")
        elif ctx_id.startswith("region") and area is None:
            area = ctx.get("short_code", "").replace("US-", "") or ctx.get("text")
    return Placemark(
        sub_thoroughfare=feature.get("address") or None,
        thoroughfare=feature.get("text") or None,
        locality=locality,
        administrative_area=area,
    )


class MapboxGeocodeProvider(GeocodeProvider):
    def __init__(
        self,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token if access_token is not None else MAPBOX_ACCESS_TOKEN
        self.timeout = timeout
        self.transport = transport

    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[Placemark]:
        url = f"{MAPBOX_GEOCODE_URL}/{coordinate.longitude},{coordinate.latitude}.json"
        params = {"access_token": self.access_token, "types": "address", "limit": 1}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise GeocodeFailed(f"Reverse geocoding request failed: {e}", cause=e)
        except ValueError as e:
            raise GeocodeFailed(f"Reverse geocoding returned invalid JSON: {e}", cause=e)

        features = data.get("features") or []
        if not features:
            return None
        return _placemark_from_feature(features[0])


class MapboxDirectionsProvider(DirectionsProvider):
    def __init__(
        self,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token if access_token is not None else MAPBOX_ACCESS_TOKEN
        self.timeout = timeout
        self.transport = transport

    async def calculate(self, request: DirectionsRequest) -> List[Route]:
        profile = MAPBOX_PROFILES[request.transport_type]
        coords_str = (
            f"{request.source.longitude},{request.source.latitude};"
            f"{request.destination.longitude},{request.destination.latitude}"
        )
        url = f"{MAPBOX_DIRECTIONS_URL}/{profile}/{coords_str}"
        params = {
            "access_token": self.access_token,
            "alternatives": "true" if request.requests_alternate_routes else "false",
            "geometries": "polyline",
            "overview": "full",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise RouteComputationFailed(f"Directions request failed: {e}", cause=e)
        except ValueError as e:
            raise RouteComputationFailed(f"Directions returned invalid JSON: {e}", cause=e)

        if data.get("code") != "Ok":
            raise RouteComputationFailed(
                f"Directions error: {data.get('code')} {data.get('message', '')}".strip()
            )

        routes: List[Route] = []
        for raw in data.get("routes", []):
            geometry = raw.get("geometry") or ""
            path = decode_path(polyline.decode(geometry)) if geometry else []
            if not path:
                logger.warning("Skipping directions route without geometry")
                continue
            legs = raw.get("legs") or [{}]
            routes.append(
                Route(
                    path=path,
                    geometry=geometry,
                    distance_m=float(raw.get("distance", 0)),
                    duration_s=float(raw.get("duration", 0)),
                    name=legs[0].get("summary") or None,
                )
            )
        if not routes:
            raise RouteComputationFailed("Directions returned no routes")
        return routes
