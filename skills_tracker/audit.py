"""Application logging and the JSONL audit trail for API actions."""

import json
import logging
from pathlib import Path

from points_engine.utils import iso_now

AUDIT_DIR = Path(__file__).resolve().parent.parent / "logs"
AUDIT_FILE = AUDIT_DIR / "audit.log"
APP_LOG_FILE = AUDIT_DIR / "app.log"

LOGGER_NAMES = ("skills_tracker", "points_engine")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def audit_log(
    action: str,
    status: str,
    *,
    lookup: str | None = None,
    profile_id: str | None = None,
    test_mode: bool | None = None,
    error: str | None = None,
    extra: dict | None = None,
):
    """
    Append one audit entry (JSONL): which lookup was made and how it ended.
    Computed scores are never recorded here.
    """
    optional = {"lookup": lookup, "profile_id": profile_id, "test_mode": test_mode, "error": error}
    entry = {"timestamp": iso_now(), "action": action, "status": status}
    entry.update({k: v for k, v in optional.items() if v is not None and v != ""})
    entry.update(extra or {})

    AUDIT_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(AUDIT_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def _build_handlers() -> list[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)

    APP_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logfile = logging.FileHandler(APP_LOG_FILE, encoding="utf-8")
    logfile.setLevel(logging.DEBUG)
    logfile.setFormatter(formatter)
    return [console, logfile]


def setup_app_logging() -> logging.Logger:
    """
    Console (INFO) and logs/app.log (DEBUG) for the service layer and the core engine.
    Safe to call more than once; returns the service-layer logger.
    """
    app_logger = logging.getLogger(LOGGER_NAMES[0])
    if app_logger.handlers:
        return app_logger

    handlers = _build_handlers()
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        for handler in handlers:
            logger.addHandler(handler)
    return app_logger
