"""Minimal resolution container for actions.

Keys are classes or string aliases and bindings are factories that receive
the container. Unbound concrete classes are built with no arguments.

Bindings made outside any ``scope`` are shared by the whole process.
Bindings and hooks made inside a scope go to an override layer kept in a
``ContextVar``, so threads and asyncio tasks each see only the layers they
pushed themselves.
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from actionkit.exceptions import InvalidReferenceError

logger = logging.getLogger(__name__)

Factory = Callable[["Container"], Any]
ResolvingHook = Callable[[Any, "Container"], Any]


def _describe(key: Any) -> str:
    return key.__qualname__ if isinstance(key, type) else str(key)


@dataclass
class _Layer:
    """Overrides pushed by one ``scope`` or ``unbound`` block."""

    bindings: dict[Any, Factory] = field(default_factory=dict)
    hooks: list[ResolvingHook] = field(default_factory=list)
    hidden: set[Any] = field(default_factory=set)


class Container:
    """Map classes and aliases to factories.

    ``before_resolving`` hooks run ahead of every ``resolve`` call. A hook
    returning something other than None answers that one resolution with
    it. Hooks may also rebind the requested key. ``scope`` pushes an
    override layer for the current context and drops it on exit.
    """

    def __init__(self) -> None:
        self._bindings: dict[Any, Factory] = {}
        self._hooks: list[ResolvingHook] = []
        self._lock = threading.RLock()
        self._layers: ContextVar[tuple[_Layer, ...]] = ContextVar(
            f"actionkit_container_layers_{id(self)}", default=()
        )

    @property
    def depth(self) -> int:
        """Number of override layers active in the current context."""
        return len(self._layers.get())

    def bind(self, key: Any, factory: Factory) -> None:
        """Bind ``key`` to ``factory``, replacing any existing binding.

        Inside a scope the binding lasts until the innermost scope exits.

        Raises
        ------
        InvalidReferenceError
            If ``key`` is neither a class nor a string alias
        """
        if not isinstance(key, (type, str)):
            raise InvalidReferenceError(key)

        layers = self._layers.get()
        if layers:
            layers[-1].bindings[key] = factory
            layers[-1].hidden.discard(key)
        else:
            with self._lock:
                self._bindings[key] = factory

        logger.debug("Bound %s", _describe(key))

    def instance(self, key: Any, obj: Any) -> None:
        """Bind ``key`` so that it always resolves to ``obj``."""
        self.bind(key, lambda container: obj)

    def unbind(self, key: Any) -> Factory | None:
        """Remove the binding for ``key`` and return it.

        Inside a scope the key is hidden until the innermost scope exits.
        """
        layers = self._layers.get()
        if not layers:
            with self._lock:
                return self._bindings.pop(key, None)

        factory = self.binding(key)
        layers[-1].bindings.pop(key, None)
        layers[-1].hidden.add(key)
        return factory

    def binding(self, key: Any) -> Factory | None:
        for layer in reversed(self._layers.get()):
            if key in layer.bindings:
                return layer.bindings[key]
            if key in layer.hidden:
                return None

        with self._lock:
            return self._bindings.get(key)

    def is_bound(self, key: Any) -> bool:
        return self.binding(key) is not None

    def can_resolve(self, key: Any) -> bool:
        """Return True if ``resolve(key)`` has a way to produce an instance."""
        if self.is_bound(key):
            return True
        return isinstance(key, type) and not inspect.isabstract(key)

    def resolve(self, key: Any) -> Any:
        """Produce an instance for ``key``.

        Raises
        ------
        InvalidReferenceError
            If ``key`` is unbound and is not a concrete class
        """
        for hook in self._active_hooks():
            override = hook(key, self)
            if override is not None:
                return override

        factory = self.binding(key)
        if factory is not None:
            return factory(self)

        if isinstance(key, type) and not inspect.isabstract(key):
            return key()

        raise InvalidReferenceError(key)

    def _active_hooks(self) -> list[ResolvingHook]:
        with self._lock:
            hooks = list(self._hooks)
        for layer in self._layers.get():
            hooks.extend(layer.hooks)
        return hooks

    def before_resolving(self, hook: ResolvingHook) -> Callable[[], None]:
        """Register ``hook(key, container)`` to run ahead of every resolution.

        Returns
        -------
        Callable[[], None]
            Callable removing the hook
        """
        layers = self._layers.get()
        if layers:
            hooks = layers[-1].hooks
            hooks.append(hook)
        else:
            hooks = self._hooks
            with self._lock:
                hooks.append(hook)

        def _remove() -> None:
            with self._lock:
                if hook in hooks:
                    hooks.remove(hook)

        return _remove

    @contextmanager
    def _pushed(self, layer: _Layer) -> Iterator[_Layer]:
        token = self._layers.set(self._layers.get() + (layer,))
        try:
            yield layer
        finally:
            self._layers.reset(token)

    @contextmanager
    def scope(self) -> Iterator[Container]:
        """Collect bindings and hooks made in the block and drop them on exit."""
        with self._pushed(_Layer()):
            yield self
        logger.debug("Container scope closed")

    @contextmanager
    def unbound(self, key: Any) -> Iterator[None]:
        """Hide every binding of ``key`` for the duration of the block."""
        with self._pushed(_Layer(hidden={key})):
            yield


_container: Container | None = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Return the process-wide container, creating it on first use."""
    global _container
    with _container_lock:
        if _container is None:
            _container = Container()
        return _container


def set_container(container: Container) -> None:
    global _container
    with _container_lock:
        _container = container


def reset_container() -> Container:
    """Replace the process-wide container with an empty one."""
    container = Container()
    set_container(container)
    return container
