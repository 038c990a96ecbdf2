"""Tests for logging configuration."""

import logging

from body_monitor.app_logging import configure_logging


def test_configure_logging_adds_one_formatted_handler() -> None:
    logger = logging.getLogger("body_monitor")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.propagate is False
    record = logging.LogRecord(
        name="body_monitor.services.sync",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Store down",
        args=None,
        exc_info=None,
    )
    formatted = logger.handlers[0].format(record)
    assert formatted.endswith(" WARNING body_monitor.services.sync: Store down")


def test_configure_logging_updates_level() -> None:
    logger = logging.getLogger("body_monitor")

    configure_logging("debug")
    assert logger.level == logging.DEBUG

    configure_logging()
    assert logger.level == logging.INFO
