"""Report SQLAlchemy statements to a query feed."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy import Engine, event

from actionkit.constants import MILLISECONDS_PER_SECOND
from actionkit.feeds import QueryFeed, query_feed

logger = logging.getLogger(__name__)

_START_KEY = "actionkit_query_start"


def _bindings(parameters: Any) -> tuple[Any, ...]:
    if parameters is None:
        return ()
    if isinstance(parameters, Mapping):
        return tuple(parameters.values())
    if isinstance(parameters, (list, tuple)):
        return tuple(parameters)
    return (parameters,)


def instrument_engine(
    engine: Engine,
    connection_name: str | None = None,
    feed: QueryFeed | None = None,
) -> Callable[[], None]:
    """Report every statement executed on ``engine`` to ``feed``.

    Parameters
    ----------
    engine : Engine
        Engine to instrument
    connection_name : str | None
        Name recorded on each query, the engine URL's database name when None
    feed : QueryFeed | None
        Target feed, the process-wide ``query_feed`` when None

    Returns
    -------
    Callable[[], None]
        Callable removing the engine event hooks
    """
    target = feed or query_feed
    name = connection_name or engine.url.database or engine.url.get_backend_name()

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault(_START_KEY, []).append(time.perf_counter())

    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        starts = conn.info.get(_START_KEY)
        if not starts:
            return
        elapsed_ms = (time.perf_counter() - starts.pop()) * MILLISECONDS_PER_SECOND
        target.notify(statement, _bindings(parameters), round(elapsed_ms, 3), name)

    def handle_error(exception_context):
        conn = exception_context.connection
        if conn is None:
            return
        starts = conn.info.get(_START_KEY)
        if starts:
            starts.pop()

    event.listen(engine, "before_cursor_execute", before_cursor_execute)
    event.listen(engine, "after_cursor_execute", after_cursor_execute)
    event.listen(engine, "handle_error", handle_error)
    logger.debug("Instrumented engine %s as '%s'", engine.url.render_as_string(), name)

    def _remove() -> None:
        if event.contains(engine, "before_cursor_execute", before_cursor_execute):
            event.remove(engine, "before_cursor_execute", before_cursor_execute)
        if event.contains(engine, "after_cursor_execute", after_cursor_execute):
            event.remove(engine, "after_cursor_execute", after_cursor_execute)
        if event.contains(engine, "handle_error", handle_error):
            event.remove(engine, "handle_error", handle_error)

    return _remove
