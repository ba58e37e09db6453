from pathlib import Path

import pytest
import yaml

from wardcord.configuration.app_configuration import (
    DEFAULT_MAX_TIMEOUT_DAYS,
    DEFAULT_PROFILER_THRESHOLD_MS,
    AppConfig,
)


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path, tmp_path: Path) -> None:
    config_payload = {
        "database": {"path": str(tmp_path / "db" / "wardcord.db")},
        "profiler": {"threshold_ms": 25},
        "moderation": {"max_timeout_days": 7},
    }
    config_path.write_text(yaml.safe_dump(config_payload), encoding="utf-8")

    config = AppConfig(config_path)

    assert config.get("profiler") == {"threshold_ms": 25}
    assert config.database_path == (tmp_path / "db" / "wardcord.db").resolve()
    assert config.profiler_threshold_ms == pytest.approx(25.0)
    assert config.max_timeout_days == 7


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.data == {}
    assert config.database_path.name == "wardcord.db"
    assert config.profiler_threshold_ms == DEFAULT_PROFILER_THRESHOLD_MS
    assert config.max_timeout_days == DEFAULT_MAX_TIMEOUT_DAYS


def test_app_config_non_mapping_is_ignored(config_path: Path) -> None:
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    assert AppConfig(config_path).data == {}


def test_app_config_broken_yaml_is_ignored(config_path: Path) -> None:
    config_path.write_text("profiler: [unclosed", encoding="utf-8")

    assert AppConfig(config_path).data == {}


def test_invalid_values_fall_back(config_path: Path) -> None:
    config_path.write_text(
        yaml.safe_dump({"profiler": {"threshold_ms": "fast"}, "moderation": {"max_timeout_days": -3}}),
        encoding="utf-8",
    )

    config = AppConfig(config_path)

    assert config.profiler_threshold_ms == DEFAULT_PROFILER_THRESHOLD_MS
    assert config.max_timeout_days == DEFAULT_MAX_TIMEOUT_DAYS


def test_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text(yaml.safe_dump({"profiler": {"threshold_ms": 1}}), encoding="utf-8")
    config = AppConfig(config_path)

    config_path.write_text(yaml.safe_dump({"profiler": {"threshold_ms": 2}}), encoding="utf-8")
    config.reload()

    assert config.profiler_threshold_ms == 2.0
