"""Shared utilities for the grid domain layer."""

from .logging import LogContext, GridLogFormatter, configure_logging, get_log_context

__all__ = [
    "LogContext",
    "GridLogFormatter",
    "configure_logging",
    "get_log_context",
]
