"""Tests for logging configuration."""

import logging

from household_hub.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("household_hub")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_service_loggers_inherit_package_handler() -> None:
    configure_logging()

    service_logger = logging.getLogger("household_hub.services.parking")

    assert service_logger.getEffectiveLevel() == logging.INFO
    assert logging.getLogger("household_hub").propagate is False
