"""
Centralized logging configuration for tilecollapse.

Provides debug logging to file for rule loading and generation runs.
Log file: <log_dir>/debug.log (with rotation)

Usage:
    from tilecollapse.logging_config import setup_logging
    setup_logging(log_dir)  # Call once at startup

All tilecollapse.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5
ROOT_LOGGER_NAME = "tilecollapse"

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-36s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for tilecollapse.

    Args:
        log_dir: Directory for the log file (created if missing)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    log_path = Path(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Calling again replaces the previous handlers
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    root_logger.debug(f"Logging to {log_path.absolute()}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the tilecollapse logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    step: int,
    position: tuple[int, int],
    tile_id: int,
    entropy: int,
) -> None:
    """Log a collapse chosen by the engine."""
    x, y = position
    logger.debug(f"STEP {step:05d} | COLLAPSE | ({x}, {y}) -> tile {tile_id} | entropy={entropy}")


def log_propagation(
    logger: logging.Logger,
    step: int,
    passes: int,
    collapsed: int,
) -> None:
    """Log the end of a propagation run."""
    logger.debug(f"STEP {step:05d} | PROPAGATE | passes={passes} | collapsed={collapsed}")


def log_outcome(
    logger: logging.Logger,
    state: str,
    steps: int,
    details: str | None = None,
) -> None:
    """Log the terminal state of a run."""
    details_str = f" | {details}" if details else ""
    logger.info(f"OUTCOME | {state} | steps={steps}{details_str}")


def log_load_issue(
    logger: logging.Logger,
    source: Path | str,
    line: int | None,
    message: str,
) -> None:
    """Log an input entry that was skipped while loading rules."""
    line_str = f":{line}" if line is not None else ""
    logger.warning(f"LOAD | {source}{line_str} | {message}")
