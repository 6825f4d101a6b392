"""Instrument actions and the actions they call."""

from actionkit.constants import ListenerKind
from actionkit.core import (
    Action,
    Container,
    HandlesEvents,
    emits_events,
    get_container,
    get_event_bus,
    shutdown_event_bus,
)
from actionkit.exceptions import (
    ActionKitError,
    ConfigurationError,
    EventNotDeclaredError,
    InvalidReferenceError,
    ListenerNotExecutedError,
    UnexpectedCallError,
)
from actionkit.feeds import QueryFeed, query_feed
from actionkit.testing import Harness

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionKitError",
    "ConfigurationError",
    "Container",
    "EventNotDeclaredError",
    "HandlesEvents",
    "Harness",
    "InvalidReferenceError",
    "ListenerKind",
    "ListenerNotExecutedError",
    "QueryFeed",
    "UnexpectedCallError",
    "emits_events",
    "get_container",
    "get_event_bus",
    "query_feed",
    "shutdown_event_bus",
]
