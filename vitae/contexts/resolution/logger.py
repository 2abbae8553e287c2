"""
Resolution context logger.

Provides logging interface for the resolution context with automatic [resolve] prefix.
All resolution modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from vitae.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[resolve]"


def setup_resolution_logger(log_dir: Path, variant_name: str = "") -> Path:
    """
    Setup logger for resolution context.

    Args:
        log_dir: Directory for this resolution session
        variant_name: Variant being resolved, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="resolve",
        log_dir=log_dir,
        extra_provenance={"Variant": variant_name or "(master)"},
    )


def _log_debug(message: str) -> None:
    """Log debug message with [resolve] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_resolution_result(resolved_resume) -> None:
    """
    Log a one-line summary of a resolution.

    Args:
        resolved_resume: ResolvedResume from resolve()
    """
    if resolved_resume.variant is None:
        _log_debug("No variant selected, using master as-is")
        return

    _log_debug(
        f"Resolved variant '{resolved_resume.variant.name}': "
        f"{len(resolved_resume.resolved.experience)}/{len(resolved_resume.master.experience)} experience(s), "
        f"sections: {', '.join(resolved_resume.sections) or '(none)'}"
    )
