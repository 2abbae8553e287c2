"""
Portability context logger.

Provides logging interface for the portability context with automatic [portable] prefix.
All portability modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Iterable

from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[portable]"


def setup_portability_logger(log_dir: Path, operation: str = "import") -> Path:
    """
    Setup logger for portability context.

    Args:
        log_dir: Directory for this session
        operation: Operation name for provenance ("import", "export", "backup", "restore")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="portable",
        log_dir=log_dir,
        extra_provenance={"Operation": operation},
    )


# Wrapper functions with automatic [portable] prefix


def _log_info(message: str) -> None:
    """Log info message with [portable] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [portable] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [portable] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [portable] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level portability logging helpers


def log_validation_failure(subject: str, errors: Iterable[str]) -> None:
    """Log every validation problem found for an incoming document."""
    errors = list(errors)
    _log_error(f"{subject}: {len(errors)} validation problem(s)")
    for error in errors:
        _log_error(f"  - {error}")


def log_import_result(section: str, mode: str, before: int, after: int) -> None:
    """
    Log the outcome of a section import.

    Args:
        section: Section key imported
        mode: "replace" or "merge"
        before: Item count before import (1 for scalar sections)
        after: Item count after import
    """
    _log_success(f"Imported '{section}' ({mode}): {before} -> {after} item(s)")


def log_backup_result(archive_path: Path, data_types: Iterable[str], action: str) -> None:
    """Log a written or restored backup bundle."""
    _log_success(f"Backup {action}: {archive_path}")
    _log_info(f"  Data types: {', '.join(data_types) or '(none)'}")
