# src/gamerlink/tests/test_logging/test_queue_logging.py
import json
import logging
from logging.handlers import QueueHandler
from pathlib import Path

from gamerlink.core.logging.builder import NonBlockingQueueHandler, setup_logging, stop_queue_logging
from gamerlink.core.logging.filters import reset_request_id, set_request_id


def test_queue_listener_writes_file(make_settings, tmp_path):
    settings = make_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path, LOG_LEVEL="DEBUG", LOG_USE_QUEUE=True)
    setup_logging(settings)

    logger = logging.getLogger("test.queue")
    token = set_request_id("test-req-1")
    try:
        for i in range(10):
            logger.info("test message %d", i, extra={"iteration": i, "password": "hunter2"})
    finally:
        reset_request_id(token)

    # flushes everything still queued
    stop_queue_logging()

    lines = [json.loads(line) for line in (Path(tmp_path) / "app.log").read_text().splitlines()]
    first = next(r for r in lines if r["logger"] == "test.queue")
    assert first["message"] == "test message 0"
    assert first["iteration"] == 0
    assert first["request_id"] == "test-req-1"
    assert first["password"] == "***REDACTED***"


def test_bounded_non_blocking_queue_uses_dropping_handler(make_settings):
    setup_logging(make_settings(LOG_USE_QUEUE=True, LOG_QUEUE_MAX_SIZE=10, LOG_QUEUE_BLOCKING=False))

    root_handlers = logging.getLogger().handlers
    assert len(root_handlers) == 1
    assert isinstance(root_handlers[0], NonBlockingQueueHandler)


def test_blocking_queue_uses_plain_queue_handler(make_settings):
    setup_logging(make_settings(LOG_USE_QUEUE=True, LOG_QUEUE_MAX_SIZE=10, LOG_QUEUE_BLOCKING=True))

    [handler] = logging.getLogger().handlers
    assert type(handler) is QueueHandler


def test_stop_queue_logging_is_idempotent():
    stop_queue_logging()
    stop_queue_logging()
