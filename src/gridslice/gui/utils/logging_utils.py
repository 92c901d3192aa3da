"""
Route gridslice log records to the GUI console.

Records can come from the slicing worker thread, so the handler only puts
(message, level) pairs on a queue; the console drains it on the main
thread.
"""
from __future__ import annotations

import logging
from queue import Queue
from typing import Optional

ROOT_LOGGER = "gridslice"


class ModuleNameFormatter(logging.Formatter):
    """Prefix messages with the module that logged them, minus the package name."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        name = record.name
        if name.startswith(ROOT_LOGGER + "."):
            name = name[len(ROOT_LOGGER) + 1:]
        if name and name != ROOT_LOGGER:
            message = f"[{name.rsplit('.', 1)[-1]}] {message}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class QueueLogHandler(logging.Handler):
    """
    A logging handler that puts (message, level name) pairs on a queue.

    Level names pass through unchanged; the console decides which to show.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(ModuleNameFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.log_queue.put((self.format(record), record.levelname))
        except Exception:
            self.handleError(record)


def attach_queue_handler(
    log_queue: Queue,
    logger_name: Optional[str] = ROOT_LOGGER,
    level: int = logging.INFO,
) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to ``logger_name``.

    The logger's own level is lowered to ``level`` if it would otherwise
    filter those records out before they reach the handler.

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    handler = QueueLogHandler(log_queue, level)
    logger.addHandler(handler)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = ROOT_LOGGER) -> None:
    """Remove a handler added by attach_queue_handler."""
    logging.getLogger(logger_name).removeHandler(handler)
