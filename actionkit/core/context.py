"""Explicit call context tracking the chain of actions currently executing.

Every ``Action.handle`` invocation pushes its instance on entry and pops it
on exit. Event propagation and the harness' only-guard look the chain up
here instead of inspecting interpreter frames. The stack lives in a
``ContextVar`` so threads and asyncio tasks each see their own chain.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_active: ContextVar[tuple[Any, ...]] = ContextVar("actionkit_active_actions", default=())


@contextmanager
def entering(instance: Any) -> Iterator[None]:
    """Mark ``instance`` as executing for the duration of the block."""
    token = _active.set(_active.get() + (instance,))
    try:
        yield
    finally:
        _active.reset(token)


def active_chain() -> tuple[Any, ...]:
    """Return the active instances, outermost first."""
    return _active.get()


def is_active(instance: Any) -> bool:
    """Return True if ``instance`` is currently executing."""
    return any(entry is instance for entry in _active.get())


def ancestors_of(instance: Any) -> Iterator[Any]:
    """Yield the instances enclosing ``instance``, nearest first.

    When ``instance`` is on the chain, only entries outside its innermost
    occurrence are yielded. Otherwise the whole chain is walked from the
    innermost entry outward. ``instance`` itself is always skipped.
    """
    chain = _active.get()
    start = len(chain)

    for index in range(len(chain) - 1, -1, -1):
        if chain[index] is instance:
            start = index
            break

    for index in range(start - 1, -1, -1):
        if chain[index] is not instance:
            yield chain[index]


def find_active(predicate: Callable[[Any], bool]) -> Any | None:
    """Return the innermost active instance matching ``predicate``."""
    for entry in reversed(_active.get()):
        if predicate(entry):
            return entry
    return None
