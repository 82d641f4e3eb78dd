"""Unit tests for scheduler_lite.config_loader."""

from pathlib import Path

import pytest

from scheduler_lite.config_loader import Config, load_config
from scheduler_lite.lite_exceptions import ConfigError

pytestmark = pytest.mark.unit


class TestConfigFromDict:
    def test_defaults(self) -> None:
        cfg = Config.from_dict(None)
        assert cfg == Config()
        assert cfg.data_dir == "data"
        assert cfg.week_starts_on == "monday"

    def test_values_are_normalized(self) -> None:
        cfg = Config.from_dict({"log_level": "debug", "week_starts_on": "Sunday", "data_dir": 5})
        assert cfg.log_level == "DEBUG"
        assert cfg.week_starts_on == "sunday"
        assert cfg.data_dir == "5"

    def test_invalid_values_fall_back_with_warning(self, caplog) -> None:
        with caplog.at_level("WARNING"):
            cfg = Config.from_dict({"log_level": "LOUD", "week_starts_on": "friday"})

        assert cfg.log_level == "INFO"
        assert cfg.week_starts_on == "monday"
        assert "week_starts_on" in caplog.text

    def test_unknown_keys_are_ignored(self) -> None:
        assert Config.from_dict({"refresh_interval": 60}) == Config()

    def test_merged_skips_none(self) -> None:
        cfg = Config(data_dir="/srv/cal").merged({"data_dir": None, "backup_path": "b.txt"})
        assert cfg.data_dir == "/srv/cal"
        assert cfg.backup_path == "b.txt"


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_config(str(tmp_path / "nope.yaml")) == Config()

    def test_default_path_is_relative_to_cwd(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "scheduler_lite").mkdir()
        (tmp_path / "scheduler_lite" / "config.yaml").write_text("data_dir: here\n", encoding="utf-8")

        assert load_config().data_dir == "here"

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "data_dir: /var/lib/scheduler\nweek_starts_on: sunday\nbackup_path: /tmp/b.txt\n",
            encoding="utf-8",
        )

        cfg = load_config(str(path))

        assert cfg == Config(
            data_dir="/var/lib/scheduler",
            week_starts_on="sunday",
            backup_path="/tmp/b.txt",
        )

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text('{"log_level": "WARNING"}', encoding="utf-8")
        assert load_config(str(path)).log_level == "WARNING"

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == Config()

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("data_dir: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))
