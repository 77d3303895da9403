"""Logger configuration for trainlog.

Nothing is configured on import; the CLI calls ``configure_logging`` once per
invocation so library users keep loguru's default stderr sink.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from trainlog.config.settings import Settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{file.name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {file.name}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> list[int]:
    """Replace loguru's sinks with a console sink and an optional file sink.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file. If None, only console logging.
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")

    Returns:
        Handler ids of the added sinks
    """
    logger.remove()
    handler_ids = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                log_path,
                format=FILE_FORMAT,
                level=level,
                rotation=rotation,
                retention=retention,
                compression="zip",
                encoding="utf-8",
            )
        )

    logger.debug(f"Logging initialized (level={level}, file={log_file})")
    return handler_ids


def configure_logging(settings: Settings) -> list[int]:
    return setup_logger(level=settings.log_level, log_file=settings.log_file)
