"""Logging formatters for action-aware output."""

import logging


class ActionContextFormatter(logging.Formatter):
    """Logging formatter that prepends the action name from the extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with an action prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message, prefixed with ``[<action>]`` when the
            record carries an ``action`` attribute
        """
        msg = super().format(record)
        action = getattr(record, "action", None)

        if action:
            return f"[{action}] {msg}"

        return msg
