"""scheduler_lite - personal calendar scheduler with recurrence expansion.

The recurrence core (interval parsing, occurrence expansion, next-reminder
resolution and duration formatting) is exposed at package level. Storage,
views and the command line live in their own modules.
"""

__version__ = "0.1.0"

from typing import Optional

from .lite_interval_parser import parse_interval
from .lite_recurrence_expander import expand_occurrences, next_occurrence_at_or_after
from .lite_reminder_service import format_duration, resolve_next_reminder

__all__ = [
    "expand_occurrences",
    "format_duration",
    "next_occurrence_at_or_after",
    "parse_interval",
    "resolve_next_reminder",
    "run_cli",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    This sets a sensible default formatter and level so that early startup
    messages are visible on the console. Callers may adjust the level later
    (e.g. from config).

    Honors the SCHEDULER_DEBUG environment variable (truthy values: "1", "true",
    "yes", "on") which forces DEBUG verbosity without changing code.
    """
    import logging
    import os
    import sys

    debug_env = os.environ.get("SCHEDULER_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure basic handler if no handlers are present to avoid duplicate output.
    if not root.handlers:
        from colorlog import ColoredFormatter

        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message
        # Only the level is colorized.
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        formatter = ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def run_cli(args: object) -> int:
    """Run one scheduler command.

    Args:
        args: Parsed command line namespace (see ``scheduler_lite.__main__``)

    Returns:
        Process exit status
    """
    import logging
    import os

    _init_logging(getattr(args, "log_level", None) or os.environ.get("SCHEDULER_LOG_LEVEL"))

    from .cli_commands import dispatch
    from .config_manager import ConfigManager
    from .lite_exceptions import SchedulerError
    from .lite_logging import configure_lite_logging, reset_logging_to_debug

    logger = logging.getLogger(__name__)

    try:
        cfg = ConfigManager().load_full_config(getattr(args, "config", None))
        overrides = {
            "data_dir": getattr(args, "data_dir", None),
            "log_level": getattr(args, "log_level", None),
        }
        cfg = cfg.merged(overrides)

        if getattr(args, "debug", False):
            reset_logging_to_debug()
        else:
            configure_lite_logging(debug_mode=cfg.log_level == "DEBUG", log_level=cfg.log_level)

        return dispatch(args, cfg)
    except SchedulerError as exc:
        logger.error("%s", exc)
        return 1
