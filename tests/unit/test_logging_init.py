from __future__ import annotations

import logging
from io import StringIO

import csv_link_editor.logging.init as log_init
from csv_link_editor.logging.init import (
    APP_LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    set_level,
    setup_logging,
)


def _capture(logger: logging.Logger) -> StringIO:
    buf = StringIO()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(buf)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    return buf


def test_setup_logging_creates_logger_with_labeled_formatter(clean_logging):
    """setup_logging installs exactly one labeled stdout handler."""
    logger = setup_logging()

    assert logger.name == APP_LOGGER_NAME
    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)


def test_setup_logging_idempotent(clean_logging):
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1
    assert get_logger() is logger1


def test_labeled_prefixes(clean_logging):
    """Every line starts with INFO|WARN|ERROR|SUMMARY."""
    logger = setup_logging()
    buf = _capture(logger)

    logger.info("info message")
    logger.warning("warning message")
    logger.error("error message")
    log_summary("file=pages.csv rows=3 link_rows=2")

    assert buf.getvalue().splitlines() == [
        "INFO info message",
        "WARN warning message",
        "ERROR error message",
        "SUMMARY file=pages.csv rows=3 link_rows=2",
    ]


def test_summary_level_registered(clean_logging):
    setup_logging()
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_module_loggers_propagate_into_app_logger(clean_logging):
    logger = setup_logging()
    buf = _capture(logger)

    logging.getLogger("csv_link_editor.engine.store").info("from the store")

    assert buf.getvalue() == "INFO from the store\n"


def test_set_level_debug(clean_logging):
    logger = setup_logging()
    buf = _capture(logger)

    logger.debug("hidden")
    set_level("DEBUG")
    logger.debug("shown")

    assert buf.getvalue() == "DEBUG shown\n"


def test_exception_info_is_appended(clean_logging):
    logger = setup_logging()
    buf = _capture(logger)
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("failed")
    out = buf.getvalue()
    assert out.startswith("ERROR failed\n")
    assert "RuntimeError: boom" in out


def test_reset_logging(clean_logging):
    setup_logging()
    log_init.reset_logging()
    assert log_init._logger is None
