from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from wardcord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_DATABASE_PATH = "./data/wardcord.db"
DEFAULT_PROFILER_THRESHOLD_MS = 10.0
DEFAULT_MAX_TIMEOUT_DAYS = 28


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The mapping loaded from ``./config/app_config.yml`` is cached in memory and
    exposed through ``get`` plus a handful of typed properties. A missing or
    broken file is logged and behaves like an empty mapping, so every property
    falls back to its default.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def reload(self) -> Dict[str, Any]:
        """Re-read the YAML file, replace the cache and return the new mapping."""
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """The cached mapping. Callers should treat it as read-only."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    def _section(self, name: str) -> Dict[str, Any]:
        section = self._data.get(name, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def database_path(self) -> Path:
        """Location of the SQLite file holding guild settings."""
        value = self._section("database").get("path") or DEFAULT_DATABASE_PATH
        return Path(str(value)).resolve()

    @property
    def profiler_threshold_ms(self) -> float:
        """Root duration (milliseconds) at which a profiler prints its breakdown."""
        value = self._section("profiler").get("threshold_ms", DEFAULT_PROFILER_THRESHOLD_MS)
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid profiler.threshold_ms %r; using default", value)
            return DEFAULT_PROFILER_THRESHOLD_MS

    @property
    def max_timeout_days(self) -> int:
        """Longest communication timeout the platform accepts, in days."""
        value = self._section("moderation").get("max_timeout_days", DEFAULT_MAX_TIMEOUT_DAYS)
        try:
            days = int(value)
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid moderation.max_timeout_days %r; using default", value)
            return DEFAULT_MAX_TIMEOUT_DAYS
        return days if days > 0 else DEFAULT_MAX_TIMEOUT_DAYS


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
