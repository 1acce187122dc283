from .errors import (
    GeocodeFailed,
    InvalidTransition,
    LocationError,
    NoLocationAvailable,
    PermissionDenied,
    RouteComputationFailed,
)
from .events import EventSource, Subscription

__all__ = [
    "EventSource",
    "Subscription",
    "LocationError",
    "PermissionDenied",
    "GeocodeFailed",
    "RouteComputationFailed",
    "NoLocationAvailable",
    "InvalidTransition",
]
