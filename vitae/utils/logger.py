"""
Session logging for vitae commands.

One session = one directory under LOGS_PATH holding a single <context>.log.
The file sink records everything from DEBUG up; the console sink goes to
stderr so command output on stdout (markdown, JSON) stays clean.

Context-specific wrappers live in contexts/{context}/logger.py and call
setup_logger() with their own context name and provenance.
"""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from vitae import __version__

load_dotenv()
CONSOLE_LOG_LEVEL = os.getenv("VITAE_CONSOLE_LOG_LEVEL", "INFO")

LEVEL_COLORS = {
    "SUCCESS": "<green>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    level_colors: dict = None,
) -> Path:
    """
    Route loguru output for one session to a log file and the console.

    Replaces any previously configured sinks.

    Args:
        context_name: Log file stem (e.g., "resolve", "portable")
        log_dir: Session directory, created if missing
        extra_provenance: Extra key-value lines for the provenance header
        level_colors: Console colors per level, merged over LEVEL_COLORS

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            context_name="portable",
            log_dir=Path("outs/logs/backup_20251114T123456"),
            extra_provenance={"Operation": "backup"},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=CONSOLE_LOG_LEVEL, colorize=True)

    log_provenance({"Context": context_name, **(extra_provenance or {})})

    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """
    Write a provenance header: how this session was started and with what.

    Args:
        extra_context: Extra key-value lines appended after the standard ones
    """
    header = {
        "vitae": __version__,
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        **(extra_context or {}),
    }

    logger.debug("-" * 60)
    for key, value in header.items():
        logger.debug(f"{key}: {value}")
    logger.debug("-" * 60)
