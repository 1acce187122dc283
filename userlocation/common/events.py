"""
Typed event sources with explicit, cancellable subscriptions.

Collaborators (location manager, map display) expose one EventSource per
callback they would otherwise deliver through a delegate. Controllers keep the
Subscription they get back and cancel it when they stop listening.
"""

import logging
from typing import Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by EventSource.subscribe()."""

    def __init__(self, source: "EventSource", token: int):
        self._source: Optional[EventSource] = source
        self._token = token

    @property
    def active(self) -> bool:
        return self._source is not None

    def cancel(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self._source is None:
            return
        self._source._remove(self._token)
        self._source = None


class EventSource(Generic[T]):
    """Synchronous fan-out of values to subscribed handlers, in subscription order."""

    def __init__(self, name: str = "event"):
        self.name = name
        self._handlers: Dict[int, Callable[[T], None]] = {}
        self._next_token = 0

    def subscribe(self, handler: Callable[[T], None]) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self._handlers[token] = handler
        return Subscription(self, token)

    def emit(self, value: T) -> None:
        # Snapshot so handlers may cancel subscriptions while we dispatch
        for handler in list(self._handlers.values()):
            handler(value)

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def _remove(self, token: int) -> None:
        self._handlers.pop(token, None)
        logger.debug(f"Unsubscribed handler {token} from {self.name}")
