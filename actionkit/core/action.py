"""The Action base class."""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from actionkit.core.container import get_container
from actionkit.core.context import entering
from actionkit.core.handles_events import HandlesEvents

if TYPE_CHECKING:
    from actionkit.testing.harness import Harness
    from actionkit.testing.stubs import ActionStub

logger = logging.getLogger(__name__)

A = TypeVar("A", bound="Action")


def _tracked(handle: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(handle)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        with entering(self):
            return handle(self, *args, **kwargs)

    wrapper.__actionkit_tracked__ = True
    return wrapper


class Action(HandlesEvents, ABC):
    """A unit of work with a single ``handle`` entry point.

    Every ``handle`` defined on a subclass runs with the instance pushed on
    the active call context, which is how forwarded events find their
    nearest event-capable caller and how a harness recognises calls made
    from inside its root action.

    Nested actions should be obtained with ``make()`` so that a harness can
    substitute them.

    Examples
    --------
    >>> class SendInvoice(Action):
    ...     def handle(self, invoice_id):
    ...         return RenderPdf.make().handle(invoice_id)
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        handle = cls.__dict__.get("handle")
        if callable(handle) and not getattr(handle, "__actionkit_tracked__", False):
            cls.handle = _tracked(handle)

    @abstractmethod
    def handle(self, *args: Any, **kwargs: Any) -> Any:
        """Run the action."""

    @classmethod
    def make(cls: type[A]) -> A:
        """Resolve an instance through the process container."""
        return get_container().resolve(cls)

    @classmethod
    def fake(cls, alias: str | None = None) -> ActionStub:
        """Bind a stub for this class (or ``alias``) and return its handle.

        The stub rejects every call until one is expected with
        ``expect_call``.
        """
        from actionkit.testing.stubs import ActionStub

        stub = ActionStub(cls)
        get_container().instance(alias or cls, stub.mock)
        logger.debug("Faked %s", cls.__name__, extra={"action": cls.__name__})
        return stub

    @classmethod
    def test(cls, configure: Callable[[Harness], Any] | None = None) -> Harness:
        """Build a harness around a freshly resolved instance."""
        from actionkit.testing.harness import Harness

        harness = Harness(cls.make())
        if configure is not None:
            configure(harness)
        return harness
