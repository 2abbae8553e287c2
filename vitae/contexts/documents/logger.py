"""
Documents context logger.

Provides logging interface for the documents context with automatic [documents] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[documents]"


def _log_debug(message: str) -> None:
    """Log debug message with [documents] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_dangling_reference(owner_kind: str, owner_id: str, ref_kind: str, ref_id: str) -> None:
    """Log a weak reference that no longer points anywhere."""
    _log_debug(f"{owner_kind} {owner_id}: {ref_kind} '{ref_id}' not found, treating as absent")
