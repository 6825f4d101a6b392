"""Thread-safe, per-instance publish/subscribe bus for action events."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from actionkit.core.identity import Identity

logger = logging.getLogger(__name__)


class EventKey(NamedTuple):
    """Address of a subscriber list.

    Attributes
    ----------
    owner : type
        Type whose capability declaration governs the event
    identity : Identity
        Identity of the emitting instance
    event : str
        Event name
    """

    owner: type
    identity: Identity
    event: str

    def describe(self) -> str:
        return f"{self.owner.__qualname__}.{self.identity}.{self.event}"


@dataclass(frozen=True)
class Event:
    """Published event, kept in the bus history for diagnostics.

    Attributes
    ----------
    key : EventKey
        Address the event was published to
    data : Any
        Payload handed to subscribers
    delivered : int
        Number of subscribers that received the event
    timestamp : float
        Publish timestamp in seconds
    thread_id : int
        Thread identifier of the publisher
    """

    key: EventKey
    data: Any
    delivered: int
    timestamp: float = field(default_factory=time.time)
    thread_id: int = field(default_factory=threading.get_ident)


class EventBus:
    """Per-instance publish/subscribe primitive.

    Subscribers are stored under ``(owner type, identity, event name)`` and
    invoked synchronously, in subscription order, with the event data as
    their only argument. Exceptions raised by subscribers propagate to the
    publisher.

    Parameters
    ----------
    history_limit : int
        Number of published events retained for diagnostics
    """

    def __init__(self, history_limit: int = 50) -> None:
        self._subscribers: dict[EventKey, list[Callable[[Any], Any]]] = {}
        self._history: deque[Event] = deque(maxlen=history_limit)
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, key: EventKey, callback: Callable[[Any], Any]) -> Callable[[], None]:
        """Subscribe a callback to an event address.

        Parameters
        ----------
        key : EventKey
            Address to subscribe to
        callback : Callable[[Any], Any]
            Callable invoked with the data of every matching event

        Returns
        -------
        Callable[[], None]
            Callable that removes this subscription when invoked
        """
        with self._lock:
            self._subscribers.setdefault(key, []).append(callback)

        logger.debug("Subscribed to %s", key.describe(), extra={"event": key.event})

        def _unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(key)
                if callbacks is None:
                    return
                try:
                    callbacks.remove(callback)
                except ValueError:
                    return
                if not callbacks:
                    del self._subscribers[key]

        return _unsubscribe

    def publish(self, key: EventKey, data: Any = None) -> int:
        """Deliver ``data`` to every subscriber of ``key``.

        Parameters
        ----------
        key : EventKey
            Address to publish to
        data : Any
            Payload passed to each subscriber

        Returns
        -------
        int
            Number of subscribers invoked
        """
        with self._lock:
            callbacks = list(self._subscribers.get(key, ()))
            self._history.append(Event(key=key, data=data, delivered=len(callbacks)))

        for callback in callbacks:
            callback(data)

        logger.debug(
            "Event published",
            extra={"event": key.event, "identity": str(key.identity), "delivered": len(callbacks)},
        )
        return len(callbacks)

    def has_subscribers(self, key: EventKey) -> bool:
        with self._lock:
            return bool(self._subscribers.get(key))

    def subscriber_count(self, identity: Identity | None = None) -> int:
        """Count subscriptions, optionally only those of one identity."""
        with self._lock:
            return sum(
                len(callbacks)
                for key, callbacks in self._subscribers.items()
                if identity is None or key.identity == identity
            )

    def forget(self, identity: Identity) -> int:
        """Remove every subscription registered under ``identity``.

        Returns
        -------
        int
            Number of subscriptions removed
        """
        with self._lock:
            keys = [key for key in self._subscribers if key.identity == identity]
            removed = sum(len(self._subscribers.pop(key)) for key in keys)

        if removed:
            logger.debug("Forgot %d subscription(s) for %s", removed, identity)
        return removed

    def recent_events(self, limit: int = 5) -> list[Event]:
        """Return the most recently published events, oldest first."""
        with self._lock:
            return list(self._history)[-limit:]

    def close(self) -> None:
        """Drop all subscriptions and mark the bus as torn down."""
        with self._lock:
            self._subscribers.clear()
            self._history.clear()
            self._closed = True


_bus: EventBus | None = None
_bus_lock = threading.Lock()


def get_event_bus() -> EventBus:
    """Return the process-wide event bus, creating it on first use."""
    global _bus
    with _bus_lock:
        if _bus is None:
            _bus = EventBus()
        return _bus


def current_event_bus() -> EventBus | None:
    """Return the process-wide event bus without creating one."""
    return _bus


def shutdown_event_bus() -> None:
    """Tear the process-wide bus down; later lookups start a fresh one."""
    global _bus
    with _bus_lock:
        if _bus is not None:
            _bus.close()
        _bus = None


def reset_event_bus() -> EventBus:
    """Replace the process-wide bus with an empty one (for testing)."""
    shutdown_event_bus()
    return get_event_bus()
