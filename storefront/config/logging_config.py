# storefront/config/logging_config.py

"""Per-run log files for the TUI, the CLI commands and the API server.

Every launch gets ``logs/run_<YYYYmmdd_HHMMSS>.log``.  The ``storefront``
logger writes everything to that file; the terminal only sees records at
``Settings.CONSOLE_LOG_LEVEL`` and above so the TUI and JSON output stay
readable.  Flask's request log (``werkzeug``) goes to the same file.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level() -> int:
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    return level if isinstance(level, int) else logging.WARNING


def prune_old_logs(logs_dir: Path, keep: int) -> int:
    """Delete all but the newest ``keep`` run logs; return how many went."""
    runs = sorted(logs_dir.glob("run_*.log"))
    stale = runs[:-keep] if keep > 0 else runs
    for path in stale:
        path.unlink(missing_ok=True)
    return len(stale)


def setup_logging() -> Path:
    """Attach the run's file and console handlers to ``storefront``.

    Safe to call more than once: later calls leave the existing handlers
    in place.

    Returns:
        Path of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    app_logger = logging.getLogger("storefront")
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    removed = prune_old_logs(logs_dir, Settings.LOG_KEEP_RUNS - 1)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_console_level())
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, _DATE_FORMAT)
    )

    app_logger.addHandler(file_handler)
    app_logger.addHandler(console_handler)
    logging.getLogger("werkzeug").addHandler(file_handler)

    app_logger.info("Logging initialised, log file: %s", log_file)
    if removed:
        app_logger.debug("Pruned %d old run logs", removed)
    return log_file
