import logging

import pytest

from gamerlink.config import Settings
from gamerlink.core.logging.builder import stop_queue_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, filters, level = list(root.handlers), list(root.filters), root.level
    yield
    stop_queue_logging()
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.filters[:] = filters
    root.setLevel(level)


@pytest.fixture
def make_settings(tmp_path):
    """Settings with logging knobs overridden; files go to a per-test directory."""
    def _make(**overrides) -> Settings:
        values = {
            "ENV": "testing",
            "LOG_LEVEL": "INFO",
            "LOG_FORMAT": "json",
            "LOG_TO_STDOUT": True,
            "LOG_DIR": tmp_path / "logs",
            "LOG_MAX_BYTES": 1_000_000,
            "LOG_BACKUP_COUNT": 1,
        }
        values.update(overrides)
        return Settings(**values)

    return _make
