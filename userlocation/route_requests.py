"""
Route Request Controller

Handles the "GO!" button: driving directions from the user's location to the
point under the map center.

Pressing go again while a computation is still running cancels it first, so
at most one computation is ever pending. Results from a cancelled
computation that still arrive are ignored.
"""

import asyncio
import functools
import logging
from typing import List, Optional, Set

from .common.errors import NoLocationAvailable, RouteComputationFailed
from .geo import BoundingRect, Coordinate
from .models import Route, RouteRequest
from .providers.contracts import DirectionsProvider, MapDisplay, OverlaySink

logger = logging.getLogger(__name__)


class RouteRequestController:
    """Cancel-then-issue driving directions with overlay publishing."""

    def __init__(
        self,
        directions: DirectionsProvider,
        overlays: OverlaySink,
        map_display: MapDisplay,
    ):
        self.directions = directions
        self.overlays = overlays
        self.map_display = map_display

        self._pending: List[RouteRequest] = []
        self._next_id = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_requests(self) -> List[RouteRequest]:
        return list(self._pending)

    def on_go_triggered(
        self, current_location: Optional[Coordinate], destination: Coordinate
    ) -> RouteRequest:
        """
        Cancel whatever is pending and request directions to destination.

        Must be called from inside the running event loop.

        Raises:
            NoLocationAvailable: If the location feed has not produced a fix yet
        """
        if current_location is None:
            logger.warning("Go pressed before any location fix, no route requested")
            raise NoLocationAvailable()

        self._reset_map_view()

        self._next_id += 1
        request = RouteRequest(
            request_id=self._next_id,
            source=current_location,
            destination=destination,
        )
        self._pending.append(request)

        task = asyncio.get_running_loop().create_task(
            self.directions.calculate(request.to_directions_request())
        )
        request.handle = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(functools.partial(self._on_route_done, request.request_id))

        logger.info(
            f"Route #{request.request_id} requested from "
            f"{current_location.latitude:.5f},{current_location.longitude:.5f} to "
            f"{destination.latitude:.5f},{destination.longitude:.5f}"
        )
        return request

    async def drain(self) -> None:
        """Wait until every issued computation has finished or been cancelled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _reset_map_view(self) -> None:
        # Collect first, then clear in one step; never remove while iterating
        stale = [r for r in self._pending if r.is_pending]
        for request in stale:
            request.cancel()
            logger.info(f"Route #{request.request_id} cancelled")
        self._pending.clear()
        self.overlays.clear_routes()

    def _on_route_done(self, request_id: int, task: asyncio.Task) -> None:
        request = next((r for r in self._pending if r.request_id == request_id), None)
        if request is None or not request.is_pending:
            # A provider may finish or fail after cancellation; mark the outcome retrieved
            if not task.cancelled() and task.exception() is not None:
                logger.debug(f"Ignoring error of cancelled route #{request_id}: {task.exception()}")
            else:
                logger.debug(f"Ignoring result of cancelled route #{request_id}")
            return
        self._pending.remove(request)

        if task.cancelled():
            request.cancel()
            logger.info(f"Route #{request_id} was cancelled by the provider")
            return

        error = task.exception()
        routes: List[Route] = [] if error is not None else list(task.result() or [])
        if error is not None or not routes:
            request.fail()
            if isinstance(error, RouteComputationFailed):
                failure = error
            elif error is not None:
                failure = RouteComputationFailed(f"Directions failed: {error}", cause=error)
            else:
                failure = RouteComputationFailed("Directions returned no routes")
            logger.error(f"Route #{request_id} failed: {failure}")
            self.overlays.publish_error(failure)
            return

        request.complete()
        for route in routes:
            self.overlays.add_route(route)
        self.map_display.set_visible_rect(BoundingRect.union(r.bounding_rect for r in routes))
        logger.info(f"Route #{request_id} resolved with {len(routes)} route(s)")
