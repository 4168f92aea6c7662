# src/gamerlink/core/logging/builder.py
"""
Logging builder: build and apply the dictConfig logging configuration and,
optionally, move handler IO onto a background QueueListener.

Configuration knobs (on `Settings`):
 - LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, ENABLE_SQL_LOGGING, ENV
 - LOG_USE_QUEUE: enable queue-backed logging
 - LOG_QUEUE_MAX_SIZE: > 0 for a bounded queue, 0 for unbounded
 - LOG_QUEUE_BLOCKING: with a bounded queue, block producers when full instead
   of dropping records
 - LOG_QUEUE_DROP_WARNING_THRESHOLD: warn once every N dropped records

Call `stop_queue_logging()` at shutdown to flush the listener.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import queue as _queue
import threading
from typing import Optional
from logging.handlers import QueueHandler, QueueListener

from gamerlink.config.settings import Settings
from gamerlink.utils.logging import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

_QUEUE_LISTENER: Optional[QueueListener] = None
_QUEUE: Optional[_queue.Queue] = None

_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler that never blocks the producer on a full bounded queue.

    A record that does not fit is dropped and counted. Every
    `drop_warning_threshold` drops, a warning goes straight to
    `logging.lastResort` (stderr), bypassing the full queue.
    """

    def __init__(self, q: _queue.Queue, drop_warning_threshold: int = 100):
        super().__init__(q)
        self.drop_warning_threshold = drop_warning_threshold

    def emit(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(self.prepare(record))
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1
                dropped = _DROPPED_LOGS_COUNT

            if self.drop_warning_threshold > 0 and dropped % self.drop_warning_threshold == 0:
                logging.lastResort.handle(
                    logging.makeLogRecord({
                        "name": __name__,
                        "levelno": logging.WARNING,
                        "levelname": "WARNING",
                        "msg": "Dropped %d log records because the logging queue was full",
                        "args": (dropped,),
                    })
                )


def get_queue_stats() -> dict:
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping:
      - formatters: "standard" (colored in text mode) and "json"
      - filters: "request_id", "redact"
      - handlers: console + error_console, or console + file + error_file when
        LOG_TO_STDOUT is false and LOG_DIR is set
      - loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": f"{get_project_name(default='gamerlink')}-api",
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            # SQL echo may contain message content; off unless explicitly enabled
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the dictConfig and, when LOG_USE_QUEUE is set, reroute the root
    logger through a queue:

      1. the real handlers created by dictConfig are detached from every logger
      2. a QueueListener runs them on a background thread
      3. a QueueHandler (NonBlockingQueueHandler for bounded, non-blocking
         queues) is attached to the root logger with the request-id and redact
         filters, so both run in the producer's context where the contextvar lives
    """
    global _QUEUE_LISTENER, _QUEUE

    # Reconfiguring while a listener is running would leak its thread
    stop_queue_logging()

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    root_logger = logging.getLogger()
    root_logger.addFilter(RequestIdFilter())

    if not settings.LOG_USE_QUEUE:
        return

    current_handlers = list(root_logger.handlers)
    if not current_handlers:
        return

    handlers_to_move = set(current_handlers)
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            for h in list(logger_obj.handlers):
                if h in handlers_to_move:
                    logger_obj.removeHandler(h)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size) if max_size > 0 else _queue.Queue()

    if max_size > 0 and not settings.LOG_QUEUE_BLOCKING:
        qh: QueueHandler = NonBlockingQueueHandler(log_queue, settings.LOG_QUEUE_DROP_WARNING_THRESHOLD)
    else:
        qh = QueueHandler(log_queue)

    qh.addFilter(RequestIdFilter())
    qh.addFilter(RedactFilter())

    listener = QueueListener(log_queue, *current_handlers, respect_handler_level=True)
    listener.start()
    root_logger.addHandler(qh)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def stop_queue_logging() -> None:
    """Stop the QueueListener (flushing queued records) and clear module refs. Safe to call twice."""
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()
    except Exception:
        logging.getLogger(__name__).exception("Failed to stop QueueListener cleanly")
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None
