"""
Location Authorization Gate

Owns the device-location permission state machine:
- requests permission while it is undetermined
- starts the live-location feed once authorized and centers the map on the user
- stops the feed and explains why when permission is denied or restricted

Location fixes are re-published on `location_updated` for dependents.
"""

import logging
from typing import Optional

from .common.errors import PermissionDenied
from .common.events import EventSource, Subscription
from .config import DEFAULT_REGION_IN_METERS
from .geo import Coordinate
from .models import PermissionState
from .providers.contracts import AlertPresenter, LocationManager, MapDisplay

logger = logging.getLogger(__name__)

BEST_ACCURACY = -1.0  # best the device offers

SERVICES_DISABLED_TITLE = "Location services are disabled"
SERVICES_DISABLED_MESSAGE = "Please enable location tracking to continue"

PERMISSION_MESSAGES = {
    PermissionState.DENIED: (
        "Location access denied",
        "Allow location access for this app in Settings to see where you are.",
    ),
    PermissionState.RESTRICTED: (
        "Location access restricted",
        "Location access is restricted on this device, for example by parental controls.",
    ),
}


class LocationAuthorizationGate:
    """Permission state machine in front of the live-location feed."""

    def __init__(
        self,
        location_manager: LocationManager,
        map_display: MapDisplay,
        alerts: AlertPresenter,
        region_in_meters: float = DEFAULT_REGION_IN_METERS,
    ):
        self.location_manager = location_manager
        self.map_display = map_display
        self.alerts = alerts
        self.region_in_meters = region_in_meters

        self.location_updated: EventSource[Coordinate] = EventSource("gate.location_updated")
        self.state: Optional[PermissionState] = None
        self.tracking = False
        self._latest_fix: Optional[Coordinate] = None
        self.last_error: Optional[PermissionDenied] = None
        self._auth_subscription: Optional[Subscription] = None
        self._feed_subscription: Optional[Subscription] = None

    @property
    def latest_location(self) -> Optional[Coordinate]:
        """Most recent fix from the live feed; None until one arrives or once tracking stops."""
        if not self.tracking:
            return None
        return self._latest_fix

    def start(self) -> bool:
        """
        Check device location services, then evaluate our own permission.

        Returns:
            False if location services are switched off for the whole device
        """
        if not self.location_manager.location_services_enabled():
            logger.warning("Location services are disabled on this device")
            self.alerts.show_alert(SERVICES_DISABLED_TITLE, SERVICES_DISABLED_MESSAGE)
            return False

        self.location_manager.desired_accuracy = BEST_ACCURACY
        if self._auth_subscription is None:
            self._auth_subscription = self.location_manager.authorization_changed.subscribe(
                self.on_authorization_changed
            )
        self.on_authorization_changed(self.location_manager.authorization_status())
        return True

    def stop(self) -> None:
        if self._auth_subscription is not None:
            self._auth_subscription.cancel()
            self._auth_subscription = None
        self._stop_tracking()

    def on_authorization_changed(self, state: PermissionState) -> None:
        previous = self.state
        self.state = state
        logger.debug(f"Authorization changed: {previous} -> {state.value}")

        if state.is_authorized:
            if not self.tracking:
                self._start_tracking()
        elif state is PermissionState.UNDETERMINED:
            if previous is not PermissionState.UNDETERMINED:
                logger.info("Requesting when-in-use location authorization")
                self.location_manager.request_when_in_use_authorization()
        elif state.is_blocked:
            # Permission can be revoked from Settings while we are running
            self._stop_tracking()
            if previous is not state:
                title, message = PERMISSION_MESSAGES[state]
                self.last_error = PermissionDenied(message)
                logger.info(f"Location permission {state.value}, not accessing location: {self.last_error}")
                self.alerts.show_alert(title, self.last_error.message)

    def center_on_user_location(self) -> None:
        # The manager may hold a cached fix from before the feed started
        location = self._latest_fix or self.location_manager.location
        if location is None:
            return
        self.map_display.set_region(location, self.region_in_meters, self.region_in_meters)

    def _start_tracking(self) -> None:
        self.tracking = True
        self.map_display.shows_user_location = True
        self.center_on_user_location()
        self._feed_subscription = self.location_manager.location_updated.subscribe(
            self._on_location_fix
        )
        self.location_manager.start_updating_location()
        logger.info("Started tracking user location")

    def _stop_tracking(self) -> None:
        if self._feed_subscription is not None:
            self._feed_subscription.cancel()
            self._feed_subscription = None
        if self.tracking:
            self.location_manager.stop_updating_location()
            self.map_display.shows_user_location = False
            self.tracking = False
            self._latest_fix = None
            logger.info("Stopped tracking user location")

    def _on_location_fix(self, coordinate: Coordinate) -> None:
        self._latest_fix = coordinate
        self.location_updated.emit(coordinate)
