"""Static event capability declarations for action types.

A class declares the events it may emit or receive with the
``emits_events`` decorator. Subclasses without a declaration of their own
inherit the one from their nearest declaring ancestor.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

DECLARATION_ATTRIBUTE = "__action_events__"

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class CapabilityDeclaration:
    """Immutable, ordered list of event names a type may emit or receive.

    Parameters
    ----------
    events : tuple[str, ...]
        Declared event names, in declaration order

    Raises
    ------
    ValueError
        If no event is declared
    TypeError
        If an entry is not a string
    """

    events: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.events:
            raise ValueError("Events array cannot be empty")

        for event in self.events:
            if not isinstance(event, str):
                raise TypeError(f"Event names must be strings, got {event!r}")

    def __contains__(self, event: object) -> bool:
        return event in self.events

    def __iter__(self):
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)


def emits_events(*events: str | Iterable[str]):
    """Class decorator declaring the events a type may emit or receive.

    Accepts names as positional arguments or as a single list.

    Examples
    --------
    >>> @emits_events("order.placed", "order.failed")
    ... class PlaceOrder(Action):
    ...     def handle(self): ...
    """
    if len(events) == 1 and not isinstance(events[0], str):
        names = tuple(events[0])
    else:
        names = tuple(events)

    declaration = CapabilityDeclaration(names)

    def decorate(cls: T) -> T:
        setattr(cls, DECLARATION_ATTRIBUTE, declaration)
        return cls

    return decorate


def declaring_type(cls: type) -> type | None:
    """Return the nearest class in ``cls``'s MRO that carries a declaration."""
    for klass in cls.__mro__:
        if isinstance(klass.__dict__.get(DECLARATION_ATTRIBUTE), CapabilityDeclaration):
            return klass
    return None


def declaration_for(cls: type) -> CapabilityDeclaration | None:
    """Return the declaration that applies to ``cls``, if any."""
    owner = declaring_type(cls)
    if owner is None:
        return None
    return owner.__dict__[DECLARATION_ATTRIBUTE]


def declared_events(subject: Any) -> tuple[str, ...]:
    """Return the declared events of a class or instance.

    Instances are looked up through ``__class__`` so that wrappers which
    present themselves as their subject type resolve to the subject's
    declaration rather than their own absence of one.
    """
    cls = subject if isinstance(subject, type) else subject.__class__
    declaration = declaration_for(cls)
    return declaration.events if declaration is not None else ()
