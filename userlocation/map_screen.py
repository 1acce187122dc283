"""
Map Screen

Wires the location gate and both controllers to the screen's collaborators:

    location manager -> LocationAuthorizationGate -> map display
    map display.region_changed -> GeocodeThrottleController -> address label
    GO! button -> RouteRequestController -> route overlays

The screen is its own address sink; route overlays go straight to the map.
"""

import logging
from typing import List, Optional

from .common.errors import NoLocationAvailable
from .common.events import Subscription
from .config import Settings, configure_logging
from .geocode_throttle import GeocodeThrottleController
from .location_gate import LocationAuthorizationGate
from .models import Route, RouteRequest
from .providers import ProviderSet, load_providers
from .providers.contracts import AlertPresenter, LocationManager, MapDisplay
from .route_requests import RouteRequestController

logger = logging.getLogger(__name__)

NO_LOCATION_TITLE = "Where are you?"
NO_LOCATION_MESSAGE = "Your location isn't available yet. Try again in a moment."


class MapOverlaySink:
    """Route overlays drawn directly on the map display."""

    def __init__(self, map_display: MapDisplay):
        self.map_display = map_display
        self.last_error: Optional[Exception] = None

    def add_route(self, route: Route) -> None:
        self.map_display.add_overlay(route)

    def clear_routes(self) -> None:
        self.map_display.remove_overlays()

    def publish_error(self, error: Exception) -> None:
        # No alert for route failures, only the log and last_error
        self.last_error = error
        logger.error(f"Route overlay not updated: {error}")


class MapScreen:
    """Live location, center-point address and directions on one map."""

    def __init__(
        self,
        location_manager: LocationManager,
        map_display: MapDisplay,
        alerts: AlertPresenter,
        providers: ProviderSet,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.location_manager = location_manager
        self.map_display = map_display
        self.alerts = alerts
        self.providers = providers

        self.address_text = ""
        self.address_error: Optional[Exception] = None
        self.overlay_sink = MapOverlaySink(map_display)

        self.gate = LocationAuthorizationGate(
            location_manager,
            map_display,
            alerts,
            region_in_meters=self.settings.region_in_meters,
        )
        self.geocoder = GeocodeThrottleController(
            providers.geocode,
            self,
            min_distance_m=self.settings.geocode_min_distance_m,
        )
        self.router = RouteRequestController(
            providers.directions,
            self.overlay_sink,
            map_display,
        )
        self._subscriptions: List[Subscription] = []

    @classmethod
    def from_env(
        cls,
        location_manager: LocationManager,
        map_display: MapDisplay,
        alerts: AlertPresenter,
    ) -> "MapScreen":
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        return cls(
            location_manager,
            map_display,
            alerts,
            load_providers(settings.mode),
            settings=settings,
        )

    def start(self) -> bool:
        """Subscribe to the map and start the permission flow."""
        if not self._subscriptions:
            self._subscriptions.append(
                self.map_display.region_changed.subscribe(self.geocoder.on_center_changed)
            )
        return self.gate.start()

    def stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self.gate.stop()

    async def aclose(self) -> None:
        self.stop()
        await self.geocoder.drain()
        await self.router.drain()

    def go_pressed(self) -> Optional[RouteRequest]:
        """Route from the user to the map center; alerts if we don't know where the user is."""
        try:
            return self.router.on_go_triggered(
                self.gate.latest_location, self.map_display.center_coordinate
            )
        except NoLocationAvailable as e:
            self.alerts.show_alert(NO_LOCATION_TITLE, NO_LOCATION_MESSAGE)
            logger.info(f"Route not requested: {e}")
            return None

    # Address sink

    def publish_address(self, address: str) -> None:
        self.address_text = address
        self.address_error = None

    def publish_error(self, error: Exception) -> None:
        self.address_error = error
        logger.warning(f"Address not updated: {error}")
