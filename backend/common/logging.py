"""
Common logging configuration for backend services and scripts.

This module configures loguru once per process so that the journey service, its
command-line scripts and its tests all share the same log layout.

Sinks:
    - stdout: colorized, at the configured LOG_LEVEL
    - {log_dir}/{service_name}.log: everything at LOG_LEVEL, rotated at 50 MB, kept 7 days
    - {log_dir}/{service_name}-error.log: ERROR and above, rotated at 10 MB, kept 30 days

Example:
    ```python
    from common.logging import setup_logging

    setup_logging("journey-service")

    from loguru import logger
    logger.info("Journey service started")
    ```
"""

from pathlib import Path
import sys

from loguru import logger

from common.config import get_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    service_name: str | None = None,
    log_dir: str | Path = "logs",
    log_to_files: bool = True,
) -> None:
    """
    Configure loguru handlers for the given service.

    Args:
        service_name: Name of the service (e.g., "journey-service"). Used to
            load settings and to name the log files. Generic names are used
            when None.
        log_dir: Directory for the rotating log files. Created if missing.
        log_to_files: When False only the console sink is installed. Scripts
            that print their output to stdout pass False.

    Side Effects:
        - Removes any previously installed loguru handlers
        - Creates the log directory when file logging is enabled
    """
    settings = get_settings(service_name)

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=settings.LOG_LEVEL,
        colorize=True,
    )

    if not log_to_files:
        return

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    base_name = service_name or "app"
    service_log_file = logs_dir / f"{base_name}.log"
    service_error_file = logs_dir / f"{base_name}-error.log"

    logger.add(
        service_error_file,
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    )

    logger.add(
        service_log_file,
        format=FILE_FORMAT,
        level=settings.LOG_LEVEL,
        rotation="50 MB",
        retention="7 days",
        compression="zip",
    )
