"""Global constants for actionkit.

This module contains package-wide constants shared by the event system,
the listeners and the harness.
"""

from enum import Enum

RECORD_MEMORY_EVENT = "action.record_memory"
"""Reserved event name used to request a memory checkpoint.

Published by ``Action.record_memory`` on the emitting instance's identity.
Bypasses capability validation so that every action can emit it without
declaring it.
"""

SUGGESTION_MAX_DISTANCE = 3
"""Maximum edit distance for "did you mean" suggestions.

An undeclared event name is only paired with the closest declared name when
the two are at most this many single-character edits apart.
"""

DEFAULT_CONNECTION_NAME = "default"
"""Connection name recorded for queries reported without one."""

DEFAULT_LOG_CHANNEL = "default"
"""Channel recorded for log entries coming from the root logger."""

PACKAGE_LOGGER_NAME = "actionkit"
"""Logger namespace of this package.

Records from this namespace are never captured by log listeners so that the
harness does not observe its own diagnostics.
"""

BYTES_PER_UNIT = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}
"""Byte multipliers for the supported memory units (binary, 1024 base)."""

UNIT_ALIASES = {
    "BYTES": "B",
    "KILOBYTES": "KB",
    "MEGABYTES": "MB",
    "GIGABYTES": "GB",
    "TERABYTES": "TB",
}
"""Long unit names accepted wherever a memory unit is expected."""

MILLISECONDS_PER_SECOND = 1000
"""Number of milliseconds in one second."""

CONFIG_ENV_VAR = "ACTIONKIT_CONFIG"
"""Environment variable pointing at the YAML configuration file."""

DEFAULT_CONFIG_FILE = "actionkit.yaml"
"""Configuration file looked up in the working directory by default."""


class ListenerKind(str, Enum):
    """Instrumentation features a harness can wire around an action."""

    MEASURE = "measure"
    PROFILE = "profile"
    QUERIES = "queries"
    LOGS = "logs"
