"""Logging utilities with custom trace level and per-operation outcome lines."""

import logging
from typing import Any

# Define custom TRACE level (lower than DEBUG)
TRACE_LEVEL = 5


def add_trace_level() -> None:
    """Add a custom TRACE logging level."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a logger with trace support."""
    if not hasattr(logging.Logger, "trace"):
        add_trace_level()

    return logging.getLogger(name)


def log_operation(
    logger: logging.Logger, operation: str, outcome: str, **fields: Any
) -> None:
    """
    Emit the single summary line for a store operation.

    Successful outcomes log at INFO, anything else at WARNING.

    Args:
        logger: Logger to write to
        operation: Operation name (load, create, update, remove, ...)
        outcome: "ok" or an error kind
        **fields: Extra key=value pairs appended in sorted order
    """
    extras = " ".join(f"{key}={fields[key]!r}" for key in sorted(fields))
    level = logging.INFO if outcome == "ok" else logging.WARNING
    logger.log(level, f"task_store.{operation} outcome={outcome} {extras}".rstrip())
