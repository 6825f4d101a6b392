"""Harness, listeners and stubs for instrumenting actions."""

from actionkit.testing.harness import Harness
from actionkit.testing.listeners import (
    Listener,
    LogListener,
    MemoryProfileListener,
    QueryListener,
    TimingListener,
)
from actionkit.testing.proxy import ActionProxy, ListenerConfig, ProxyFactory, listener_config
from actionkit.testing.results import LogEntry, Measurement, MemoryCheckpoint, Profile, QueryRecord
from actionkit.testing.stubs import ActionStub

__all__ = [
    "ActionProxy",
    "ActionStub",
    "Harness",
    "Listener",
    "ListenerConfig",
    "LogEntry",
    "LogListener",
    "Measurement",
    "MemoryCheckpoint",
    "MemoryProfileListener",
    "Profile",
    "ProxyFactory",
    "QueryListener",
    "QueryRecord",
    "TimingListener",
    "listener_config",
]
