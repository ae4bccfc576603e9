"""
Centralized Logging Configuration for ux-eval.

The library modules only ever write to `loguru.logger`; sinks are configured
here, once, by the command line entry point.
"""

import sys
from pathlib import Path

from loguru import logger

from ux_eval.config import settings


def setup_cli_logging(level: str | None = None, log_file: Path | None = None) -> None:
    """
    Configure logging for the CLI process.

    Sets up:
    - Console output on stderr at the configured level
    - Optional serialized log file at DEBUG level
    """
    # Remove default handler first
    logger.remove()

    handlers: list[dict] = [
        {
            "sink": sys.stderr,
            "level": level or settings.cli_default_log_level,
            "format": "<level>{message}</level>",
        },
    ]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            {
                "sink": log_file,
                "level": "DEBUG",
                "serialize": True,
                "backtrace": True,
                "diagnose": True,
            }
        )

    logger.configure(handlers=handlers)
