"""
Logging for the geoedit engine.

Engine modules log through ``get_logger(__name__)``; ``extra`` fields are
appended to each line as ``key=value`` pairs. Host-facing calls are timed
with ``EditCallLogger`` or the ``log_edit_call`` decorator.

Usage:
    from geoedit.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Edit committed", extra={"edit_type": "movePosition"})
"""

import functools
import logging
import os
import sys
import time
from functools import lru_cache
from typing import Any

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class EditorFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields to the message."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        ]
        if extras:
            return f"{message} | {' '.join(extras)}"
        return message


class EditCallLogger:
    """
    Context manager that logs a host-facing call, its duration and a
    summary of its result. Exceptions are logged and re-raised.

    Usage:
        with EditCallLogger(logger, "get_edit_handles", selected=2) as log:
            result = {"handles": [...], "count": 6}
            log.set_result(result)
    """

    def __init__(self, logger: logging.Logger, operation: str, **params: Any):
        self.logger = logger
        self.operation = operation
        self.params = params
        self.result: Any = None
        self._start_time: float = 0

    def __enter__(self) -> "EditCallLogger":
        self._start_time = time.perf_counter()
        self.logger.debug(
            f"Operation '{self.operation}' called",
            extra={"operation": self.operation, "params": self.params},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed = f"{(time.perf_counter() - self._start_time) * 1000:.2f}"

        if exc_val is not None:
            self.logger.error(
                f"Operation '{self.operation}' failed: {exc_val}",
                extra={"operation": self.operation, "elapsed_ms": elapsed},
                exc_info=True,
            )
            return False

        self.logger.debug(
            f"Operation '{self.operation}' completed",
            extra={
                "operation": self.operation,
                "elapsed_ms": elapsed,
                "result": self._summarize_result(self.result),
            },
        )
        return False

    def set_result(self, result: Any) -> None:
        self.result = result

    def _summarize_result(self, result: Any) -> str:
        """One-word summary of a tool result."""
        if result is None:
            return "None"

        if isinstance(result, dict):
            if "error" in result:
                return f"error: {result['error']}"
            if result.get("edit"):
                return f"edit={result['edit'].get('edit_type')}"
            if "handles" in result:
                return f"handles={len(result['handles'])}"
            if "modes" in result:
                return f"modes={len(result['modes'])}"
            if "valid" in result:
                return f"valid={result['valid']}"
            return f"dict with {len(result)} keys"

        if isinstance(result, list):
            return f"list with {len(result)} items"

        return type(result).__name__


def get_log_level() -> int:
    """Level named by ``LOG_LEVEL`` (case-insensitive); INFO if unset or unknown."""
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing to stderr through ``EditorFormatter``.

    Cached so each logger gets a single handler; propagation is off to
    avoid duplicate lines when the host configures the root logger.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(EditorFormatter())
        logger.addHandler(handler)
        logger.setLevel(get_log_level())
        logger.propagate = False

    return logger


def log_edit_call(logger: logging.Logger, operation: str):
    """
    Decorator form of ``EditCallLogger``; keyword arguments are logged as
    the call's parameters.

    Usage:
        @log_edit_call(logger, "list_modes")
        def list_modes() -> dict:
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with EditCallLogger(logger, operation, **kwargs) as log:
                result = func(*args, **kwargs)
                log.set_result(result)
                return result
        return wrapper
    return decorator
