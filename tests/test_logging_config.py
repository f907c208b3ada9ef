"""Tests for console logging setup."""

import logging

from modern_patch.logging_config import ColoredFormatter, setup_logging


def _record(level):
    return logging.LogRecord("modern_patch.test", level, __file__, 1, "hello", None, None)


def test_formatter_without_color():
    formatter = ColoredFormatter("%(levelname)s %(message)s", use_color=False)
    assert formatter.format(_record(logging.WARNING)) == "WARNING hello"


def test_formatter_with_color():
    formatter = ColoredFormatter("%(message)s", use_color=True)
    text = formatter.format(_record(logging.ERROR))
    assert text.startswith(ColoredFormatter.COLORS["ERROR"])
    assert text.endswith(ColoredFormatter.RESET)


def test_setup_logging_replaces_handlers():
    setup_logging("WARNING")
    setup_logging("WARNING")
    package_logger = logging.getLogger("modern_patch")
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING


def test_verbose_forces_debug():
    setup_logging("ERROR", verbose=True)
    assert logging.getLogger("modern_patch").level == logging.DEBUG
