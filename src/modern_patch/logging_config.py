"""Console logging setup for the modern-patch CLI."""

import logging
import sys

LOG_FORMAT = "%(levelname)-8s %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[34m",      # Blue
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_color: bool) -> None:
        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{message}{self.RESET}"


def setup_logging(log_level: str = "INFO", verbose: bool = False) -> None:
    """Configure the modern_patch logger hierarchy.

    Args:
        log_level: Level name from settings, e.g. "INFO".
        verbose: Force DEBUG and the detailed format.
    """
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            VERBOSE_FORMAT if verbose else LOG_FORMAT,
            use_color=sys.stderr.isatty(),
        )
    )

    package_logger = logging.getLogger("modern_patch")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
