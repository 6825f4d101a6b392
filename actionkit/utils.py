"""Utility functions for actionkit."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta

from actionkit.constants import (
    BYTES_PER_UNIT,
    MILLISECONDS_PER_SECOND,
    SUGGESTION_MAX_DISTANCE,
    UNIT_ALIASES,
)

_FORMAT_UNITS = ["B", "KB", "MB", "GB", "TB"]


def edit_distance(left: str, right: str) -> int:
    """Compute the Levenshtein distance between two strings.

    Parameters
    ----------
    left : str
        First string
    right : str
        Second string

    Returns
    -------
    int
        Minimum number of single-character insertions, deletions or
        substitutions turning ``left`` into ``right``
    """
    if len(left) < len(right):
        left, right = right, left

    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (left_char != right_char),
                )
            )
        previous = current

    return previous[-1]


def closest_match(
    name: str, candidates: Iterable[str], max_distance: int = SUGGESTION_MAX_DISTANCE
) -> str | None:
    """Find the candidate closest to ``name`` by edit distance.

    Parameters
    ----------
    name : str
        Name to look up
    candidates : Iterable[str]
        Names to compare against, in declaration order
    max_distance : int
        Largest distance still worth suggesting

    Returns
    -------
    str | None
        Closest candidate (first one wins on ties), or None if none is
        within ``max_distance``
    """
    best: str | None = None
    best_distance = max_distance + 1

    for candidate in candidates:
        distance = edit_distance(name, candidate)
        if distance < best_distance:
            best, best_distance = candidate, distance

    return best


def normalize_unit(unit: str) -> str:
    """Normalize a memory unit name to its short upper-case form.

    Raises
    ------
    ValueError
        If the unit is not supported
    """
    key = unit.strip().upper()
    key = UNIT_ALIASES.get(key, key)
    if key not in BYTES_PER_UNIT:
        raise ValueError(f"Invalid unit: {unit}. Supported units: B, KB, MB, GB, TB")
    return key


def convert_bytes(value: int, unit: str) -> int | float:
    """Convert a byte count to the given unit.

    Parameters
    ----------
    value : int
        Byte count, may be negative for deltas
    unit : str
        Target unit (B, KB, MB, GB, TB or their long names)

    Returns
    -------
    int | float
        Bytes as int for ``B``, otherwise the value rounded to 2 decimals
    """
    key = normalize_unit(unit)
    if key == "B":
        return value

    magnitude = round(abs(value) / BYTES_PER_UNIT[key], 2)
    return -magnitude if value < 0 else magnitude


def format_bytes(value: int) -> str:
    """Format a byte count using the largest fitting unit.

    Parameters
    ----------
    value : int
        Byte count, may be negative

    Returns
    -------
    str
        Human-readable size (e.g., "1.5 MB", "-512 B")
    """
    magnitude = abs(value)
    power = 0
    while power < len(_FORMAT_UNITS) - 1 and magnitude >= 1024 ** (power + 1):
        power += 1

    scaled = round(magnitude / (1024**power), 2)
    if scaled == int(scaled):
        scaled = int(scaled)

    sign = "-" if value < 0 else ""
    return f"{sign}{scaled} {_FORMAT_UNITS[power]}"


def format_memory(value: int, unit: str | None = None) -> int | float | str:
    """Format bytes for display, or convert them when a unit is given."""
    if unit is None:
        return format_bytes(value)
    return convert_bytes(value, unit)


def seconds_to_timedelta(seconds: float) -> timedelta:
    """Convert a float number of seconds to a timedelta."""
    return timedelta(microseconds=seconds * 1_000_000)


def milliseconds_between(start: float, end: float) -> float:
    """Milliseconds elapsed between two ``time.time()`` style timestamps."""
    return (end - start) * MILLISECONDS_PER_SECOND
