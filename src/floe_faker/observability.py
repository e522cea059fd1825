"""Structured logging for floe-faker."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_logger: BoundLogger | None = None

LOGGER_NAME = "floe.faker"


def get_logger() -> BoundLogger:
    """Get the package logger, creating it if necessary.

    Returns:
        Configured structlog BoundLogger instance.

    Example:
        >>> logger = get_logger()
        >>> logger.info("record_inserted", table="rooms", key=1)
    """
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(LOGGER_NAME)
    assert _logger is not None  # Type narrowing for mypy
    return _logger
