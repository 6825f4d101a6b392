"""Render listener results as rich tables."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from actionkit.constants import ListenerKind
from actionkit.testing.results import LogEntry, Measurement, Profile, QueryRecord

_LEVEL_STYLES = {
    "CRITICAL": "bold red",
    "ERROR": "red",
    "WARNING": "yellow",
    "INFO": "green",
    "DEBUG": "dim",
}


def measurements_table(measurements: Iterable[Measurement], title: str = "Measurements") -> Table:
    table = Table(title=title)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Duration", justify="right")

    for measurement in measurements:
        table.add_row(measurement.subject, f"{measurement.duration_ms:.2f}ms")

    return table


def profiles_table(profiles: Iterable[Profile], title: str = "Profiles") -> Table:
    """Build a table with duration, memory delta, peak and checkpoint count."""
    table = Table(title=title)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Duration", justify="right")
    table.add_column("Memory", justify="right")
    table.add_column("Peak", justify="right")
    table.add_column("Checkpoints", style="dim")

    for profile in profiles:
        checkpoints = ", ".join(
            f"{record.name}={record.formatted_memory()}" for record in profile.memory_records
        )
        table.add_row(
            profile.subject,
            f"{profile.duration_ms:.2f}ms",
            str(profile.memory_used()),
            str(profile.peak_memory_formatted()),
            checkpoints,
        )

    return table


def queries_table(queries: Iterable[QueryRecord], title: str = "Queries") -> Table:
    table = Table(title=title)
    table.add_column("Action", style="cyan", no_wrap=True)
    table.add_column("Connection", style="magenta")
    table.add_column("SQL")
    table.add_column("Bindings", style="dim")
    table.add_column("Time", justify="right")

    for query in queries:
        table.add_row(
            query.action or "",
            query.connection,
            Text(query.sql),
            Text(json.dumps(list(query.bindings), default=str)),
            f"{query.duration_ms}ms",
        )

    return table


def logs_table(entries: Iterable[LogEntry], title: str = "Logs") -> Table:
    table = Table(title=title)
    table.add_column("Timestamp", style="dim")
    table.add_column("Channel", style="magenta")
    table.add_column("Level")
    table.add_column("Message")
    table.add_column("Action", style="cyan")

    for entry in entries:
        table.add_row(
            entry.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            entry.channel,
            Text(entry.level, style=_LEVEL_STYLES.get(entry.level, "")),
            Text(entry.message),
            entry.action or "",
        )

    return table


_TABLE_BUILDERS = {
    ListenerKind.MEASURE: measurements_table,
    ListenerKind.PROFILE: profiles_table,
    ListenerKind.QUERIES: queries_table,
    ListenerKind.LOGS: logs_table,
}


def results_table(kind: ListenerKind, results: Sequence[Any]) -> Table:
    """Build the table matching a listener kind."""
    return _TABLE_BUILDERS[ListenerKind(kind)](results)


def print_results(
    results: dict[ListenerKind, Sequence[Any]],
    console: Console | None = None,
) -> None:
    """Print one table per feature that produced results.

    Parameters
    ----------
    results : dict[ListenerKind, Sequence[Any]]
        Typically ``Harness.results`` after ``handle``
    console : Console | None
        Target console, a new stderr console when None
    """
    console = console or Console(stderr=True)

    for kind in ListenerKind:
        entries = results.get(kind) or []
        if entries:
            console.print(results_table(kind, entries))
