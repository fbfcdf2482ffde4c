"""Logging bootstrap.

The log file is the only diagnostic channel once the terminal is taken
over, so it is set up before anything else and a failure to open it is
fatal (the OSError propagates to the entry point).
"""

import logging
from pathlib import Path

LOG_FILE_NAME = "clashtui.log"

# A log above this size is deleted at startup (never rotated mid-session)
LOG_MAX_BYTES = 1024 * 1024

LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"

# Verbose in development, terse when run optimized (python -O)
LOG_LEVEL = logging.DEBUG if __debug__ else logging.INFO

logger = logging.getLogger(__name__)


def setup_logging(log_path: Path) -> None:
    """Route all records to `log_path`, truncating it first if oversized."""
    cleared = False
    try:
        if log_path.stat().st_size > LOG_MAX_BYTES:
            log_path.unlink()
            cleared = True
    except FileNotFoundError:
        pass

    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    logging.basicConfig(
        handlers=[handler],
        level=LOG_LEVEL,
        format=LOG_FORMAT,
        force=True,
    )
    if cleared:
        logger.info("Log file too large, clear")
    logger.info("Start Log, level: %s", logging.getLevelName(LOG_LEVEL))
