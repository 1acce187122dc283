"""
Error kinds

Every failure the controllers publish carries a stable `kind` string so sinks
can tell them apart without isinstance checks.
"""

from typing import Optional

PERMISSION_DENIED = "permission_denied"
GEOCODE_FAILED = "geocode_failed"
ROUTE_COMPUTATION_FAILED = "route_computation_failed"
NO_LOCATION_AVAILABLE = "no_location_available"
INVALID_TRANSITION = "invalid_transition"


class LocationError(Exception):
    """Base class for errors surfaced by the map screen controllers."""

    kind = "location_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class PermissionDenied(LocationError):
    """Location permission is denied or restricted. Terminal for the session."""
    kind = PERMISSION_DENIED


class GeocodeFailed(LocationError):
    """Reverse geocoding failed. Retried implicitly on the next qualifying pan."""
    kind = GEOCODE_FAILED


class RouteComputationFailed(LocationError):
    """The directions provider returned an error or no route."""
    kind = ROUTE_COMPUTATION_FAILED


class NoLocationAvailable(LocationError):
    """A route was requested before the location feed produced any fix."""
    kind = NO_LOCATION_AVAILABLE

    def __init__(self, message: str = "No user location is available yet"):
        super().__init__(message)


class InvalidTransition(LocationError):
    """Raised when a request is moved out of a terminal state."""
    kind = INVALID_TRANSITION
