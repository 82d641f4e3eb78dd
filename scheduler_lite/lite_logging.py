"""
Central logging configuration for scheduler_lite.

Keeps the scheduler's own modules at INFO (or DEBUG when troubleshooting)
while holding noisy third-party loggers at WARNING.
"""

import logging
import os
from typing import Optional

# Third-party loggers held at WARNING
SUPPRESSED_LOGGERS = [
    "asyncio",
    "yaml",
    "dateutil",
]

LITE_MODULES = [
    "scheduler_lite",
    "scheduler_lite.lite_interval_parser",
    "scheduler_lite.lite_recurrence_expander",
    "scheduler_lite.lite_reminder_service",
    "scheduler_lite.lite_calendar_views",
    "scheduler_lite.lite_store",
    "scheduler_lite.lite_backup",
]

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_lite_logging(
    debug_mode: bool = False,
    force_debug: Optional[bool] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure logging levels for scheduler_lite.

    Debug mode can be overridden via environment variable for troubleshooting.
    Outside debug mode the root logger and the scheduler_lite modules share one
    level, so records below it never reach the console handler.

    Args:
        debug_mode: Whether to enable debug logging for scheduler_lite modules
        force_debug: Override debug mode setting (None to use env var detection)
        log_level: Level name for root and scheduler_lite loggers when not in
            debug mode (None to use SCHEDULER_LOG_LEVEL, then INFO)

    Environment Variables:
        SCHEDULER_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        SCHEDULER_LOG_LEVEL: Default level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("SCHEDULER_DEBUG", "").lower() in ("1", "true", "yes")
    level_name = (log_level or os.getenv("SCHEDULER_LOG_LEVEL", "")).upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    if final_debug:
        root_level = logging.DEBUG
    elif level_name in LEVEL_NAMES:
        root_level = getattr(logging, level_name)
    else:
        root_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add basic config if no handlers exist (preserve colorful setup from __init__.py)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    logger_config: dict[str, int] = {name: logging.WARNING for name in SUPPRESSED_LOGGERS}

    for module in LITE_MODULES:
        logger_config[module] = root_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for scheduler_lite modules.")
    else:
        root_logger.debug("Production logging configuration applied.")


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.
    """
    logging.getLogger().setLevel(logging.DEBUG)

    for logger_name in SUPPRESSED_LOGGERS + LITE_MODULES:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ["scheduler_lite", *SUPPRESSED_LOGGERS]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
