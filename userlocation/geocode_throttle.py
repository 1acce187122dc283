"""
Geocode Throttle Controller

Turns map-center changes into reverse-geocode lookups for the address label.

Reverse geocoding is rate limited by the provider, so a lookup is only issued
when the center has moved more than `min_distance_m` since the last lookup.
Only the newest lookup is acted upon. Older ones are marked superseded and
their results are dropped by sequence number when they eventually arrive; the
remote call itself is never cancelled.
"""

import asyncio
import logging
from typing import Optional, Set

from .common.errors import GeocodeFailed
from .config import DEFAULT_GEOCODE_MIN_DISTANCE_METERS
from .geo import Coordinate
from .models import GeocodeRequest, Placemark, format_street_address
from .providers.contracts import AddressSink, GeocodeProvider

logger = logging.getLogger(__name__)


class GeocodeThrottleController:
    """Distance-throttled, latest-wins reverse geocoding of the map center."""

    def __init__(
        self,
        geocoder: GeocodeProvider,
        sink: AddressSink,
        min_distance_m: float = DEFAULT_GEOCODE_MIN_DISTANCE_METERS,
    ):
        self.geocoder = geocoder
        self.sink = sink
        self.min_distance_m = min_distance_m

        self.last_known_center: Optional[Coordinate] = None
        self._sequence = 0
        self._current: Optional[GeocodeRequest] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def current_request(self) -> Optional[GeocodeRequest]:
        return self._current

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def on_center_changed(self, new_center: Coordinate) -> Optional[GeocodeRequest]:
        """
        Issue a lookup for new_center if it moved far enough.

        Must be called from inside the running event loop.

        Returns:
            The issued GeocodeRequest, or None if the event was discarded
        """
        if self.last_known_center is not None:
            distance = new_center.distance_to(self.last_known_center)
            if distance <= self.min_distance_m:
                logger.debug(
                    f"Center moved {distance:.1f} m (<= {self.min_distance_m} m), skipping geocode"
                )
                return None

        previous = self._current
        if previous is not None and previous.is_pending:
            previous.supersede()
            logger.debug(f"Geocode #{previous.sequence} superseded")

        self.last_known_center = new_center
        self._sequence += 1
        request = GeocodeRequest(coordinate=new_center, sequence=self._sequence)
        self._current = request

        task = asyncio.get_running_loop().create_task(self._lookup(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(
            f"Geocode #{request.sequence} issued for "
            f"{new_center.latitude:.5f},{new_center.longitude:.5f}"
        )
        return request

    def on_geocode_result(
        self,
        sequence: int,
        placemark: Optional[Placemark] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        """Handle a finished lookup; stale sequences are dropped."""
        request = self._current
        if request is None or sequence != self._sequence or not request.is_pending:
            logger.debug(f"Discarding stale geocode result #{sequence} (latest #{self._sequence})")
            return

        if error is not None or placemark is None:
            request.fail()
            if isinstance(error, GeocodeFailed):
                failure = error
            elif error is not None:
                failure = GeocodeFailed(f"Reverse geocoding failed: {error}", cause=error)
            else:
                failure = GeocodeFailed("Reverse geocoding returned no placemark")
            logger.error(f"Geocode #{sequence} failed: {failure}")
            self.sink.publish_error(failure)
            return

        address = format_street_address(placemark)
        request.complete()
        logger.debug(f"Geocode #{sequence} resolved to {address!r}")
        self.sink.publish_address(address)

    async def drain(self) -> None:
        """Wait until every in-flight lookup has reported back."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _lookup(self, request: GeocodeRequest) -> None:
        try:
            placemark = await self.geocoder.reverse_geocode(request.coordinate)
        except Exception as e:
            self.on_geocode_result(request.sequence, error=e)
            return
        self.on_geocode_result(request.sequence, placemark=placemark)
