"""Tests for logging setup."""

import json
import logging

import pytest
import structlog
from structlog.stdlib import ProcessorFormatter

from podman_migrate.core.logging_config import LOG_FILE_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, ProcessorFormatter):
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    structlog.reset_defaults()


def test_log_file_receives_json_events(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging(log_dir=log_dir, log_level="DEBUG")

    get_logger().info("Migrated volume", name="db")
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = (log_dir / LOG_FILE_NAME).read_text().splitlines()
    events = [json.loads(line) for line in lines]
    migrated = [event for event in events if event["event"] == "Migrated volume"]
    assert migrated[0]["name"] == "db"
    assert migrated[0]["level"] == "info"
    assert "timestamp" in migrated[0]


def test_console_only_without_log_dir(tmp_path):
    setup_logging(log_level="WARNING")

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING
    assert len(root_logger.handlers) == 1
    assert not (tmp_path / LOG_FILE_NAME).exists()


def test_unknown_level_falls_back_to_info():
    setup_logging(log_level="chatty")

    assert logging.getLogger().level == logging.INFO
