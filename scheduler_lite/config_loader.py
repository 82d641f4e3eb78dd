"""scheduler_lite.config_loader

Lightweight config loader for scheduler_lite.

- Reads YAML (PyYAML); JSON files load too since JSON is valid YAML.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .lite_exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("scheduler_lite") / "config.yaml"
WEEK_START_CHOICES = ("monday", "sunday")
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """Typed configuration for scheduler_lite.

    Fields:
        data_dir: directory holding the event/recurrence/reminder/additional CSV files
        log_level: logging level name
        week_starts_on: first day of the week for `week` views ("monday" or "sunday")
        backup_path: default file used by `backup` / `restore`
    """

    data_dir: str = "data"
    log_level: str = "INFO"
    week_starts_on: str = "monday"
    backup_path: str = "backup.txt"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Unknown keys are ignored. Invalid values fall back to their defaults
        with a warning rather than failing startup.
        """
        if data is None:
            data = {}

        def _coerce_str(key: str, default: str) -> str:
            raw = data.get(key, default)
            if raw is None:
                return default
            return str(raw)

        data_dir = _coerce_str("data_dir", cls.data_dir)

        log_level = _coerce_str("log_level", cls.log_level).upper()
        if log_level not in LOG_LEVEL_CHOICES:
            logger.warning("Config log_level=%r is not a level name; using INFO", log_level)
            log_level = cls.log_level

        week_starts_on = _coerce_str("week_starts_on", cls.week_starts_on).lower()
        if week_starts_on not in WEEK_START_CHOICES:
            logger.warning(
                "Config week_starts_on=%r must be one of %s; using %s",
                week_starts_on,
                ", ".join(WEEK_START_CHOICES),
                cls.week_starts_on,
            )
            week_starts_on = cls.week_starts_on

        backup_path = _coerce_str("backup_path", cls.backup_path)

        return cls(
            data_dir=data_dir,
            log_level=log_level,
            week_starts_on=week_starts_on,
            backup_path=backup_path,
        )

    def merged(self, overrides: dict[str, Any]) -> Config:
        """Return a new Config with ``overrides`` applied on top of this one."""
        base = {
            "data_dir": self.data_dir,
            "log_level": self.log_level,
            "week_starts_on": self.week_starts_on,
            "backup_path": self.backup_path,
        }
        base.update({k: v for k, v in overrides.items() if v is not None})
        return Config.from_dict(base)


def _load_yaml(path: Path) -> Any:
    """Load a YAML (or JSON) document from ``path``."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to parse config file {path}: {exc}") from exc
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./scheduler_lite/config.yaml (relative to current working dir).

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises ConfigError.
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    raw = _load_yaml(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ConfigError("Config file must contain a mapping at top level")
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
