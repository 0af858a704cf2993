"""
contractgen Utilities Package - Cross-Cutting Helpers

Logging setup shared by the CLI and the repo-local build script.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    log_codegen_start,
    log_codegen_complete,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "log_codegen_start",
    "log_codegen_complete",
]
