"""Exception hierarchy for actionkit."""

from __future__ import annotations

from typing import Any


class ActionKitError(Exception):
    """Base exception for actionkit failures."""


class ConfigurationError(ActionKitError, ValueError):
    """Raised when a harness or the package is configured incorrectly.

    Always raised synchronously at configuration time, never deferred to
    ``Harness.handle``.
    """


class InvalidReferenceError(ConfigurationError):
    """Raised when a type or alias cannot be resolved by the container.

    Parameters
    ----------
    reference : Any
        The offending class, alias or value
    message : str | None
        Optional override for the default message
    """

    def __init__(self, reference: Any, message: str | None = None) -> None:
        self.reference = reference
        name = getattr(reference, "__qualname__", None) or repr(reference)
        super().__init__(
            message or f"The class or alias {name} is not bound to the container"
        )


class EventNotDeclaredError(ActionKitError, ValueError):
    """Raised when emitting or listening to an event an action did not declare.

    Parameters
    ----------
    message : str
        Human-readable error description
    event : str
        Event name that was rejected
    declared : tuple[str, ...]
        Event names the action declares
    suggestion : str | None
        Closest declared name, if one was close enough to suggest
    """

    def __init__(
        self,
        message: str,
        event: str,
        declared: tuple[str, ...],
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.event = event
        self.declared = declared
        self.suggestion = suggestion


class ListenerNotExecutedError(ActionKitError, RuntimeError):
    """Raised when a listener result is requested before its work completed."""


class UnexpectedCallError(ActionKitError, AssertionError):
    """Raised when a stubbed action receives a call nobody expected."""
