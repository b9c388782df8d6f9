from __future__ import annotations

import logging
from io import StringIO

import pharma_import.logging.init as log_init
from pharma_import.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def _capture(logger: logging.Logger) -> StringIO:
    stream = StringIO()
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    handler.setStream(stream)
    return stream


def test_setup_logging_creates_logger_with_labeled_formatter():
    """Test that setup_logging creates a single stdout handler with labeled format."""
    log_init.reset_logging()
    logger = setup_logging()

    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent_and_can_raise_to_debug():
    log_init.reset_logging()
    first = setup_logging()
    second = setup_logging(debug=True)

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG


def test_logging_labeled_prefixes():
    """INFO|WARN|ERROR|SUMMARY labels precede the message."""
    log_init.reset_logging()
    logger = setup_logging()
    stream = _capture(logger)

    logger.info("parsed rows=3")
    logger.warning("row 3: missing name")
    logger.error("row 4: duplicate key")
    log_summary("rows=3 valid=2")

    lines = stream.getvalue().splitlines()
    assert lines == [
        "INFO parsed rows=3",
        "WARN row 3: missing name",
        "ERROR row 4: duplicate key",
        "SUMMARY rows=3 valid=2",
    ]


def test_debug_is_hidden_by_default():
    log_init.reset_logging()
    logger = setup_logging()
    stream = _capture(logger)
    logger.debug("hidden")
    assert stream.getvalue() == ""


def test_module_loggers_propagate_into_application_logger():
    log_init.reset_logging()
    logger = setup_logging(debug=True)
    stream = _capture(logger)

    logging.getLogger("pharma_import.services.orchestrator").debug("commit failed row=3")

    assert "DEBUG commit failed row=3" in stream.getvalue()


def test_get_logger_configures_on_first_use():
    log_init.reset_logging()
    logger = get_logger()
    assert logger.name == LOGGER_NAME
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"
