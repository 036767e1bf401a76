"""Diagnostics — faulthandler, structured logging, crash dumps.

Everything lives under ~/.dithertone:
    logs/dithertone.log         JSON lines, rotated at 10 MB
    logs/dithertone_fault.log   C-level tracebacks (numpy / OpenCV / Pillow)
    crash_reports/crash_*.json  unhandled Python exceptions, PII-stripped
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import time
import traceback
from pathlib import Path

from security import strip_pii

logger = logging.getLogger(__name__)

APP_DIR = "~/.dithertone"
LOG_FILENAME = "dithertone.log"
FAULT_FILENAME = "dithertone_fault.log"

MAX_LOG_BYTES = 10_000_000
LOG_BACKUPS = 7
MAX_LOG_AGE_DAYS = 7
MAX_CRASH_REPORTS = 5

# Extra LogRecord attributes copied into the JSON entry when present
CONTEXT_FIELDS = ("stage", "algorithm", "source_id", "generation")

_fault_file = None


def _app_dir() -> str:
    return os.path.expanduser(APP_DIR)


def _validate_log_dir(env_dir: str) -> str:
    """Resolve DITHERTONE_LOG_DIR, falling back to the default outside ~/.dithertone."""
    default = os.path.join(_app_dir(), "logs")
    if not env_dir:
        return default
    resolved = os.path.realpath(env_dir)
    allowed = os.path.realpath(_app_dir())
    if resolved == allowed or resolved.startswith(allowed + os.sep):
        return resolved
    logger.warning("DITHERTONE_LOG_DIR outside %s, using default", APP_DIR)
    return default


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def _prune(directory: str, pattern: str, *, keep: int | None = None,
           max_age_days: int | None = None):
    """Delete matching files beyond the newest ``keep`` or older than ``max_age_days``."""
    try:
        files = sorted(
            Path(directory).glob(pattern),
            key=lambda f: f.stat().st_mtime,
            reverse=True,
        )
        doomed = set(files[keep:]) if keep is not None else set()
        if max_age_days is not None:
            cutoff = time.time() - max_age_days * 86400
            doomed.update(f for f in files if f.stat().st_mtime < cutoff)
        for f in doomed:
            f.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Pruning %s/%s skipped: %s", directory, pattern, e)


def _cleanup_old_logs(log_dir: str):
    _prune(log_dir, f"{LOG_FILENAME}*", max_age_days=MAX_LOG_AGE_DAYS)


def _cleanup_old_crash_reports(crash_dir: str):
    _prune(crash_dir, "crash_*.json", keep=MAX_CRASH_REPORTS)


def setup_structured_logging(log_dir: str | None = None) -> str:
    """Attach a rotating JSON handler to the root logger. Returns the log directory."""
    resolved_dir = _validate_log_dir(
        log_dir or os.environ.get("DITHERTONE_LOG_DIR", "")
    )
    os.makedirs(resolved_dir, mode=0o700, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        os.path.join(resolved_dir, LOG_FILENAME),
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setFormatter(JSONFormatter())

    level_name = os.environ.get("DITHERTONE_LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    root.addHandler(handler)

    _cleanup_old_logs(resolved_dir)
    return resolved_dir


def setup_faulthandler(log_dir: str):
    """Send C-level crash tracebacks to their own file.

    Not the rotating log: rotation would invalidate faulthandler's descriptor.
    """
    global _fault_file
    fault_path = os.path.join(log_dir, FAULT_FILENAME)
    try:
        _fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
        os.chmod(fault_path, 0o600)
        faulthandler.enable(file=_fault_file, all_threads=True)
    except OSError as e:
        print(f"WARNING: Could not enable faulthandler: {e}", file=sys.stderr)


def write_crash_report(exc_type, exc_value, exc_tb, crash_dir: str | None = None) -> str:
    """Write a PII-stripped JSON crash dump readable only by the owner. Returns its path."""
    crash_dir = crash_dir or os.path.join(_app_dir(), "crash_reports")
    os.makedirs(crash_dir, mode=0o700, exist_ok=True)

    stamp = datetime.datetime.now(tz=datetime.timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    report = strip_pii(
        {
            "extra": {
                "timestamp": stamp,
                "exception_type": exc_type.__name__ if exc_type else "Unknown",
                "exception_message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
                "python_version": sys.version,
                "platform": sys.platform,
            }
        },
        {},
    )["extra"]

    crash_path = os.path.join(crash_dir, f"crash_{stamp}.json")
    fd = os.open(crash_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        json.dump(report, f, indent=2)

    _cleanup_old_crash_reports(crash_dir)
    return crash_path


def setup_excepthook():
    """Dump unhandled exceptions to crash_reports/, then defer to the default hook."""

    def _crash_excepthook(exc_type, exc_value, exc_tb):
        try:
            write_crash_report(exc_type, exc_value, exc_tb)
        except Exception as e:
            print(f"WARNING: Could not write crash report: {e}", file=sys.stderr)
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _crash_excepthook


def init_diagnostics() -> str:
    """Initialize all diagnostic layers. Call from main.py."""
    log_dir = setup_structured_logging()
    setup_faulthandler(log_dir)
    setup_excepthook()
    logger.info("Diagnostics initialized: logging=%s, faulthandler=enabled", log_dir)
    return log_dir
