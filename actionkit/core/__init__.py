"""Core building blocks: actions, events and resolution."""

from actionkit.core.action import Action
from actionkit.core.capabilities import CapabilityDeclaration, declared_events, emits_events
from actionkit.core.container import Container, get_container, reset_container, set_container
from actionkit.core.events import EventBus, EventKey, get_event_bus, shutdown_event_bus
from actionkit.core.handles_events import HandlesEvents
from actionkit.core.identity import Identity

__all__ = [
    "Action",
    "CapabilityDeclaration",
    "Container",
    "EventBus",
    "EventKey",
    "HandlesEvents",
    "Identity",
    "declared_events",
    "emits_events",
    "get_container",
    "get_event_bus",
    "reset_container",
    "set_container",
    "shutdown_event_bus",
]
