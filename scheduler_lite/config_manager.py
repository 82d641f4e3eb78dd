"""Environment-based configuration for scheduler_lite."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from .config_loader import Config, load_config

logger = logging.getLogger(__name__)

# Environment variable -> Config field
ENV_KEYS = {
    "SCHEDULER_DATA_DIR": "data_dir",
    "SCHEDULER_LOG_LEVEL": "log_level",
    "SCHEDULER_WEEK_STARTS_ON": "week_starts_on",
    "SCHEDULER_BACKUP_PATH": "backup_path",
}


class ConfigManager:
    """Manages application configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment to avoid
        surprising overrides of user's environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        set_keys = []

        try:
            content = self.env_file_path.read_text(encoding="utf-8")
        except OSError:
            logger.debug(
                "Failed to read .env file for defaults (continuing): %s",
                str(self.env_file_path),
                exc_info=True,
            )
            return []

        for raw_line in content.splitlines():
            line = raw_line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=VALUE format
            if "=" not in line:
                continue

            key, val = line.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")

            # Only set if not already in environment
            if key and key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration overrides from environment variables.

        Recognizes:
        - SCHEDULER_DATA_DIR -> 'data_dir'
        - SCHEDULER_LOG_LEVEL -> 'log_level'
        - SCHEDULER_WEEK_STARTS_ON -> 'week_starts_on'
        - SCHEDULER_BACKUP_PATH -> 'backup_path'

        Returns:
            Mapping of Config field names to raw values
        """
        cfg: dict[str, Any] = {}
        for env_key, field_name in ENV_KEYS.items():
            value = os.environ.get(env_key)
            if value:
                cfg[field_name] = value
        return cfg

    def apply_env_overrides(self, config: Config) -> Config:
        """Return ``config`` with environment overrides applied."""
        overrides = self.build_config_from_env()
        if overrides:
            logger.debug("Applying environment overrides: %s", ", ".join(sorted(overrides)))
        return config.merged(overrides)

    def load_full_config(self, config_path: str | None = None) -> Config:
        """Load config file, .env file and environment, in increasing priority.

        This is the main entry point for loading configuration.
        """
        # Load .env file first (only sets if not already in environment)
        self.load_env_file()
        return self.apply_env_overrides(load_config(config_path))
