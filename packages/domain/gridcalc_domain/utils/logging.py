"""Logging helpers for grid processing.

This module provides:
- Source tracking using contextvars, so diagnostics name the file they came from
- A formatter that prefixes records with that context
- configure_logging() for command-line use

Usage:
    import logging
    from gridcalc_domain.utils.logging import LogContext, configure_logging

    logger = logging.getLogger(__name__)
    configure_logging("INFO")

    with LogContext(source="data/budget.csv"):
        logger.warning("Malformed position literal")
        # WARNING gridcalc_domain.engine.resolver: [source=data/budget.csv] Malformed ...
"""

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional, Union

_context_var: ContextVar[Optional[Dict[str, Any]]] = ContextVar("grid_log_context", default=None)

DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_log_context() -> Dict[str, Any]:
    """Get the key/value pairs currently attached to log records.

    Returns:
        Dictionary of context values (empty when none are set).
    """
    ctx = _context_var.get()
    return dict(ctx) if ctx is not None else {}


class LogContext:
    """Context manager that attaches key/value pairs to every log record.

    Contexts nest; inner values override outer ones for the same key and the
    previous context is restored on exit.
    """

    def __init__(self, **values: Any) -> None:
        self._values = values
        self._token = None

    def __enter__(self) -> "LogContext":
        merged = get_log_context()
        merged.update(self._values)
        self._token = _context_var.set(merged)
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            _context_var.reset(self._token)
            self._token = None


class GridLogFormatter(logging.Formatter):
    """Log formatter that includes the current LogContext."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_log_context()
        if not context:
            return super().format(record)

        prefix = "[" + " ".join(f"{k}={v}" for k, v in context.items()) + "] "

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        try:
            return super().format(record)
        finally:
            record.msg = original_msg


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Install a stderr handler with GridLogFormatter on the package loggers.

    Args:
        level: Logging level name or number (e.g. "DEBUG", logging.INFO)
    """
    if isinstance(level, str):
        level = level.upper()

    handler = logging.StreamHandler()
    handler.setFormatter(GridLogFormatter(DEFAULT_FORMAT))

    for name in ("gridcalc_domain", "gridcalc_render"):
        package_logger = logging.getLogger(name)
        package_logger.handlers = [handler]
        package_logger.setLevel(level)
        package_logger.propagate = False
