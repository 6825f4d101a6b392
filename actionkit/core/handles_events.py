"""Per-instance event emission with ancestor forwarding.

``HandlesEvents`` gives an object a private event namespace on the shared
:class:`~actionkit.core.events.EventBus`. Only events listed in the class'
capability declaration may be listened to or emitted. An instance can opt
in to relaying selected events to the nearest event-capable object on the
active call chain.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, NamedTuple

from actionkit.constants import RECORD_MEMORY_EVENT
from actionkit.core.capabilities import declared_events, declaring_type
from actionkit.core.config import get_settings
from actionkit.core.context import ancestors_of
from actionkit.core.events import EventKey, current_event_bus, get_event_bus
from actionkit.core.identity import HasIdentity, Identity
from actionkit.exceptions import EventNotDeclaredError
from actionkit.utils import closest_match

logger = logging.getLogger(__name__)


class PropagationKey(NamedTuple):
    """A relay of ``event`` from ``source`` to ``target`` that already happened."""

    source: Identity
    target: Identity
    event: str


_cascade: ContextVar[set[PropagationKey] | None] = ContextVar(
    "actionkit_propagation_cascade", default=None
)


@contextmanager
def _emission_cascade() -> Iterator[set[PropagationKey]]:
    used = _cascade.get()
    if used is not None:
        yield used
        return

    used = set()
    token = _cascade.set(used)
    try:
        yield used
    finally:
        _cascade.reset(token)


class HandlesEvents(HasIdentity):
    """Mixin adding declared, instance-scoped events.

    Examples
    --------
    >>> @emits_events("progress")
    ... class Import(Action):
    ...     def handle(self):
    ...         self.emit("progress", 50)
    >>> Import().on("progress", print).handle()
    """

    def declared_events(self) -> tuple[str, ...]:
        """Return the event names this object may emit or receive."""
        return declared_events(self)

    def event_owner(self) -> type:
        """Return the type whose declaration governs this object's events."""
        cls = self.__class__
        return declaring_type(cls) or cls

    def event_key(self, event: str) -> EventKey:
        """Return the bus address of ``event`` for this instance."""
        return EventKey(self.event_owner(), self.identity, event)

    @property
    def forwarded_events(self) -> tuple[str, ...]:
        """Events this instance relays to its nearest event-capable caller."""
        return self.__dict__.get("_forwarded_events", ())

    def on(self, event: str, callback: Callable[[Any], Any]) -> HandlesEvents:
        """Subscribe ``callback`` to ``event`` emitted by this instance.

        Parameters
        ----------
        event : str
            Declared event name
        callback : Callable[[Any], Any]
            Invoked with the event data each time the event is emitted

        Returns
        -------
        HandlesEvents
            This instance, for chaining

        Raises
        ------
        EventNotDeclaredError
            If ``event`` is not declared for this type
        """
        self._ensure_declared(event, f"Cannot listen for event '{event}'.")
        get_event_bus().subscribe(self.event_key(event), callback)
        return self

    listen = on

    def emit(self, event: str, data: Any = None) -> HandlesEvents:
        """Publish ``event`` to local subscribers, then relay it if forwarded.

        Subscribers run synchronously in subscription order and their
        exceptions propagate to the caller.

        Raises
        ------
        EventNotDeclaredError
            If ``event`` is not declared for this type
        """
        self._ensure_declared(event, f"Cannot emit event '{event}'.")

        with _emission_cascade() as used:
            get_event_bus().publish(self.event_key(event), data)

            if event in self.forwarded_events:
                self._propagate(event, data, used)

        return self

    def forward_events(self, events: Iterable[str] | None = None) -> HandlesEvents:
        """Relay the given events (all declared events if None) to the caller."""
        if events is None:
            names = self.declared_events()
        else:
            names = tuple(events)
            for name in names:
                self._ensure_declared(name, f"Cannot forward event '{name}'.")

        self.__dict__["_forwarded_events"] = names
        return self

    def record_memory(self, label: str) -> None:
        """Ask any memory profiler watching this instance for a checkpoint."""
        bus = current_event_bus()
        if bus is None:
            return
        bus.publish(self.event_key(RECORD_MEMORY_EVENT), label)

    def dispose(self) -> None:
        """Drop every subscription registered under this instance.

        Safe to call after the process-wide bus has been shut down.
        """
        bus = current_event_bus()
        if bus is None or bus.closed:
            return
        bus.forget(self.identity)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _propagate(self, event: str, data: Any, used: set[PropagationKey]) -> None:
        ancestor = next(
            (entry for entry in ancestors_of(self) if isinstance(entry, HandlesEvents)),
            None,
        )
        if ancestor is None:
            return

        if event not in ancestor.declared_events():
            logger.debug(
                "Not forwarding '%s': %s does not declare it",
                event,
                type(ancestor).__name__,
                extra={"event": event},
            )
            return

        key = PropagationKey(self.identity, ancestor.identity, event)
        if key in used:
            logger.debug("Propagation cycle stopped for '%s'", event, extra={"event": event})
            return

        used.add(key)
        ancestor.emit(event, data)

    def _ensure_declared(self, event: str, description: str) -> None:
        allowed = self.declared_events()
        if event in allowed:
            return

        distance = get_settings()["events"]["suggestion_distance"]
        suggestion = closest_match(event, allowed, max_distance=distance)

        if suggestion is not None:
            message = f"{description} Did you mean: '{suggestion}'?"
        else:
            message = f"{description} Allowed: {', '.join(allowed) or '(none)'}"

        raise EventNotDeclaredError(message, event=event, declared=allowed, suggestion=suggestion)
