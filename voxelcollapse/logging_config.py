"""
Centralized logging configuration for voxelcollapse.

Provides debug logging to file for every generation run.
Log file: <data_root>/debug.log (with rotation)

Usage:
    from voxelcollapse.logging_config import setup_logging
    setup_logging(data_root)  # Call once at startup

All voxelcollapse.* loggers will write DEBUG to file, WARNING+ to console.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from voxelcollapse.core.types import Coord


# Global configuration
ROOT_LOGGER_NAME = "voxelcollapse"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

_logging_initialized = False


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for voxelcollapse.

    Args:
        data_root: Path to data directory (log file goes here)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)  # Capture all levels

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # File handler with rotation
    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-40s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-30s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"voxelcollapse logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the voxelcollapse logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_collapse(
    logger: logging.Logger,
    step: int,
    coord: Coord,
    tile_id: str,
    source: str,
) -> None:
    """Log one committed cell. source is 'boundary', 'selected' or 'fallback'."""
    logger.debug(f"STEP {step:06d} | COLLAPSE | {coord} | {tile_id} | {source}")


def log_fallback(
    logger: logging.Logger,
    coord: Coord,
    cause: str,
    fallback_tile_id: str,
) -> None:
    """Log an empty candidate domain."""
    logger.warning(
        f"No compatible tiles for position {coord} ({cause}). Using default tile '{fallback_tile_id}'."
    )


def log_run(
    logger: logging.Logger,
    status: str,
    details: str | None = None,
) -> None:
    """Log run lifecycle (started, complete, cleared, cancelled)."""
    details_str = f" | {details}" if details else ""
    logger.info(f"RUN | {status}{details_str}")


def log_usage(
    logger: logging.Logger,
    entries: Iterable[object],
) -> None:
    """Log the usage summary, one line per tile."""
    logger.info("=== Tile Usage Summary ===")
    for entry in entries:
        logger.info(f"USAGE | {entry}")
