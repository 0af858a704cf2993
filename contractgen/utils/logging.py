"""
contractgen Logging Utilities - Session Logs for Build Runs

Overview:
---------
Centralised logging configuration for the patch and codegen pipeline.
Every CLI run writes its own timestamped log file tagged with a short
session ID, so a failed regeneration can be traced after the terminal output
is gone.

Log Location:
-------------
- Default: ~/.contractgen/logs/
- A symlink 'contractgen.log' always points to the latest session
- Can be overridden via CONTRACTGEN_LOG_DIR environment variable

Log Levels:
-----------
- DEBUG: Schema discovery details, per-file writes
- INFO: Patch summary, per-contract progress, completion
- WARNING: Unresolved $refs, definition collisions
- ERROR: Failed builds

Usage:
------
    from contractgen.utils.logging import get_logger, setup_logging

    log_file = setup_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("Generating bindings...")
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_DIR = Path.home() / ".contractgen" / "logs"
DEFAULT_LOG_LEVEL = "INFO"
SYMLINK_NAME = "contractgen.log"
ROOT_LOGGER = "contractgen"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_logging_initialised = False
_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session tagging
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that tolerates records emitted before the filter ran."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting CONTRACTGEN_LOG_DIR."""
    env_log_dir = os.getenv("CONTRACTGEN_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    return DEFAULT_LOG_DIR


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
) -> Path:
    """
    Initialise contractgen logging with a per-session log file.

    Parameters
    ----------
    level : str, optional
        DEBUG, INFO, WARNING or ERROR. Falls back to CONTRACTGEN_LOG_LEVEL,
        then INFO.
    log_dir : Path, optional
        Directory for log files. Defaults to ~/.contractgen/logs/
    console_output : bool
        Also log to stderr.

    Returns
    -------
    Path
        The log file being written to.
    """
    global _logging_initialised, _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("CONTRACTGEN_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"contractgen_{timestamp}_{_session_id}.log"
    _log_file_path = log_file

    root = logging.getLogger(ROOT_LOGGER)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for f in root.filters[:]:
        root.removeFilter(f)
    root.setLevel(log_level)

    session_filter = SessionIdFilter(_session_id)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.addFilter(session_filter)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.addFilter(session_filter)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(console_handler)

    root.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlinks need extra privileges on some platforms (Windows).
        pass

    _logging_initialised = True

    root.info("=" * 80)
    root.info("contractgen logging session started")
    root.info(f"  Session ID: {_session_id}")
    root.info(f"  Log file: {log_file}")
    root.info(f"  Log level: {level.upper()}")
    root.info("=" * 80)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``contractgen`` namespace."""
    if name.startswith(ROOT_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id


# ============================================================================
# Structured helpers
# ============================================================================

def log_codegen_start(
    logger: logging.Logger,
    contracts_dir: Path,
    out_dir: Path,
    contract_count: int,
) -> None:
    """Log the start of a codegen run."""
    logger.info("-" * 60)
    logger.info("CODEGEN START")
    logger.info(f"  Contracts dir: {contracts_dir}")
    logger.info(f"  Output dir: {out_dir}")
    logger.info(f"  Contracts: {contract_count}")
    logger.info("-" * 60)


def log_codegen_complete(
    logger: logging.Logger,
    out_dir: Path,
    success: bool,
    contracts_generated: int = 0,
    total_duration: Optional[float] = None,
) -> None:
    """Log the codegen completion summary."""
    logger.info("-" * 60)
    logger.info(f"CODEGEN {'SUCCEEDED' if success else 'FAILED'}")
    logger.info(f"  Output dir: {out_dir}")
    logger.info(f"  Contracts generated: {contracts_generated}")
    if total_duration is not None:
        logger.info(f"  Duration: {total_duration:.2f}s")
    logger.info("-" * 60)
