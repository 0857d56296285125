"""Logging configuration for the mediastore system."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

LOG_FORMAT = "%(asctime)s %(levelname)8s [%(name)s] %(message)s"
COLOR_LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)8s%(reset)s "
    "\033[90m[%(name)s]\033[0m %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

LOG_FILE_NAME = "mediastore.log"
TEST_LOG_FILE_NAME = "test.log"


def setup_logging(
    level: int | str = logging.INFO,
    use_colors: bool = True,
    log_dir: Path | None = None,
    is_test_env: bool = False,
) -> None:
    """Configure the root logger for the mediastore system.

    Args:
        level: Logging level, either numeric or a level name such as "DEBUG"
        use_colors: Whether console output is colourised
        log_dir: Directory for a log file; console only when not given
        is_test_env: Whether the log file is overwritten on each run
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handlers = [_console_handler(use_colors)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(log_dir, is_test_env))

    logging.basicConfig(level=level, handlers=handlers, force=True)


def _console_handler(use_colors: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)

    if use_colors:
        formatter: logging.Formatter = colorlog.ColoredFormatter(
            COLOR_LOG_FORMAT,
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handler.setFormatter(formatter)
    return handler


def _file_handler(log_dir: Path, is_test_env: bool) -> logging.Handler:
    handler: logging.Handler
    if is_test_env:
        handler = logging.FileHandler(log_dir / TEST_LOG_FILE_NAME, mode="w")
    else:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for __name__)."""
    return logging.getLogger(name)


def setup_production_logging(
    level: int | str = logging.INFO, log_dir: Path = Path("logs")
) -> None:
    """Log to the console and a rotating file under log_dir."""
    setup_logging(level=level, log_dir=log_dir)


def setup_test_logging(
    level: int | str = logging.DEBUG, log_dir: Path = Path("logs", "test")
) -> None:
    """Log to the console and a test log file that is overwritten on each run."""
    setup_logging(level=level, use_colors=False, log_dir=log_dir, is_test_env=True)
