"""
Logging setup and structured log lines for Outpost.

Modules log through logging.getLogger(__name__) under the "outpost"
namespace. The CLI calls setup_logging once, which sends everything to a
rotating data/debug.log and warnings to stderr.

The helpers below give each subsystem a fixed, greppable line shape:
    TICK 00042 | CACHE | occupancy | gate | region=W1N1 | dropped 12 tiles
    PLACEMENT | region=W1N1 | anchor=(25, 25) | chose (24, 25) | band=[1,2] score=10
    PLAN | region=W1N1 | link | 3 positions
    STORAGE | save | data/plans.json | OK | 1 regions
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-30s | %(message)s"


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Point the "outpost" logger at a rotating file and stderr.

    Safe to call again (e.g. with another data directory): handlers from
    the previous call are closed and replaced.

    Args:
        data_root: Directory for debug.log, created if missing
        log_level: Threshold for the file handler
        console_level: Threshold for stderr

    Returns:
        Path to the log file
    """
    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    package_logger = logging.getLogger("outpost")
    package_logger.setLevel(logging.DEBUG)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    package_logger.addHandler(console_handler)

    package_logger.info(
        f"Outpost logging started {datetime.now().isoformat(timespec='seconds')} | "
        f"file={log_path.absolute()} ({logging.getLevelName(log_level)}) | "
        f"console={logging.getLevelName(console_level)}"
    )
    return log_path


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_cache(
    logger: logging.Logger,
    tick: int,
    kind: str,
    status: str,
    region: str,
    details: str | None = None,
) -> None:
    """Log an observation cache hit, miss or refresh."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"TICK {tick:05d} | CACHE | {kind} | {status} | region={region}{details_str}")


def log_placement(
    logger: logging.Logger,
    region: str,
    anchor: object,
    found: object | None,
    details: str | None = None,
) -> None:
    """Log the outcome of a single placement search."""
    outcome = f"chose {found}" if found is not None else "no candidate"
    details_str = f" | {details}" if details else ""
    logger.debug(f"PLACEMENT | region={region} | anchor={anchor} | {outcome}{details_str}")


def log_plan(
    logger: logging.Logger,
    region: str,
    category: str,
    positions: int,
    details: str | None = None,
) -> None:
    """Log a placement plan being saved."""
    details_str = f" | {details}" if details else ""
    logger.info(f"PLAN | region={region} | {category} | {positions} positions{details_str}")


def log_storage(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log plan store file operations."""
    status = "OK" if success else "FAILED"
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STORAGE | {operation}{path_str} | {status}{details_str}")
