"""
userlocation - live location, center-point address and driving directions

Submodules:
- location_gate: Location permission state machine and live-location feed
- geocode_throttle: Distance-throttled reverse geocoding of the map center
- route_requests: Cancel-then-issue driving directions
- map_screen: Composition of the above around a map display
- providers: External provider contracts, Mapbox and fixture implementations
"""

from .geo import BoundingRect, Coordinate
from .models import PermissionState, Placemark, RequestState, Route
from .location_gate import LocationAuthorizationGate
from .geocode_throttle import GeocodeThrottleController
from .route_requests import RouteRequestController
from .map_screen import MapScreen

__all__ = [
    "BoundingRect",
    "Coordinate",
    "PermissionState",
    "Placemark",
    "RequestState",
    "Route",
    "LocationAuthorizationGate",
    "GeocodeThrottleController",
    "RouteRequestController",
    "MapScreen",
]
