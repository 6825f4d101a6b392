"""Logging handler buffering records in memory."""

import logging
import threading
from collections.abc import Iterable
from typing import Any

_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the attributes passed to a log call through ``extra``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRIBUTES and not key.startswith("_")
    }


class CapturingLogHandler(logging.Handler):
    """Logging handler that keeps every record it receives.

    Parameters
    ----------
    ignore : Iterable[str]
        Logger namespaces whose records are dropped
    level : int
        Minimum level handled

    Attributes
    ----------
    records : list[logging.LogRecord]
        Captured records, in emission order
    """

    def __init__(self, ignore: Iterable[str] = (), level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.ignore = tuple(ignore)
        self.records: list[logging.LogRecord] = []
        self._records_lock = threading.Lock()

    def is_ignored(self, name: str) -> bool:
        return any(name == prefix or name.startswith(f"{prefix}.") for prefix in self.ignore)

    def emit(self, record: logging.LogRecord) -> None:
        """Buffer ``record`` unless its logger is ignored.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to capture
        """
        if self.is_ignored(record.name):
            return

        with self._records_lock:
            self.records.append(record)

    def clear(self) -> None:
        with self._records_lock:
            self.records.clear()
