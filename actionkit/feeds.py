"""Notification feed for executed data queries.

Database integrations call ``notify`` once per executed statement. Query
listeners subscribe only while their window is open.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

QuerySubscriber = Callable[[str, tuple[Any, ...], float, "str | None"], None]


class QueryFeed:
    """Fan out query notifications to the current subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[QuerySubscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: QuerySubscriber) -> Callable[[], None]:
        """Register ``callback(sql, bindings, duration_ms, connection)``.

        Returns
        -------
        Callable[[], None]
            Callable removing the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def notify(
        self,
        sql: str,
        bindings: Sequence[Any] | None = None,
        duration_ms: float = 0.0,
        connection: str | None = None,
    ) -> int:
        """Report one executed statement.

        Parameters
        ----------
        sql : str
            Statement text
        bindings : Sequence[Any] | None
            Bound parameters
        duration_ms : float
            Execution time in milliseconds
        connection : str | None
            Connection name, the configured default when None

        Returns
        -------
        int
            Number of subscribers notified
        """
        with self._lock:
            subscribers = list(self._subscribers)

        params = tuple(bindings) if bindings is not None else ()
        for callback in subscribers:
            callback(sql, params, duration_ms, connection)

        return len(subscribers)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)


query_feed = QueryFeed()
"""Process-wide feed used when no other feed is given."""
