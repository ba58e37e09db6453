"""
Per-guild settings cache with background persistence.

Provides a small API over the guild settings mappings:
- get(guild_id) -> dict: the guild's mapping (created empty on first access)
- set_option(guild_id, name, raw): validate through the option catalog and persist
- save(guild_id): schedule a persist without waiting for it

Rows are written through :class:`GuildSettingsRepository`.
"""

from __future__ import annotations

import asyncio
import copy
from pathlib import Path
from typing import Any, Dict, List, Set

from wardcord.database.db_connection import ConnectionManager, db_connection
from wardcord.database.db_schema import SchemaManager
from wardcord.datatypes.discord_datatypes import GuildID
from wardcord.settings.guild_settings import guild_options
from wardcord.settings.options import OptionRegistry, SettingUpdate
from wardcord.settings.repositories.guild_settings_repo import GuildSettingsRepository
from wardcord.util.logger import get_logger

logger = get_logger("guild_settings_manager")


class GuildSettingsManager:
    """
    Owner of every guild's settings mapping.

    Mappings are never removed while the process runs. Mutations go through
    :meth:`set_option` (or an option's ``set`` followed by :meth:`save`).
    """

    def __init__(
        self,
        connection: ConnectionManager = db_connection,
        repository: GuildSettingsRepository | None = None,
        options: OptionRegistry = guild_options,
    ) -> None:
        self._connection = connection
        self._repository = repository or GuildSettingsRepository()
        self._options = options
        self._guilds: Dict[GuildID, Dict[str, Any]] = {}
        self._active_persists: Set[asyncio.Task] = set()
        self._db_initialized = False

        logger.info("[GUILD SETTINGS MANAGER] Initialized")

    @property
    def options(self) -> OptionRegistry:
        return self._options

    async def async_init(self, db_path: Path) -> None:
        """Open the database, create the schema and load every stored guild."""
        if self._db_initialized:
            return

        if not self._connection.is_open:
            await self._connection.open(db_path)
        await SchemaManager.initialize_schema(self._connection.connection)

        async with self._connection.read() as conn:
            loaded = await self._repository.get_all(conn)
        self._guilds.update(loaded)
        self._db_initialized = True
        logger.info("[GUILD SETTINGS MANAGER] Loaded settings for %d guild(s)", len(loaded))

    # ========== Core API ==========

    def get(self, guild_id: GuildID) -> Dict[str, Any]:
        """Return the guild's settings mapping, creating an empty one if missing."""
        settings = self._guilds.get(guild_id)
        if settings is None:
            settings = {}
            self._guilds[guild_id] = settings
            logger.debug("[GUILD SETTINGS MANAGER] Created settings for guild %s", guild_id)
        return settings

    def list_guild_ids(self) -> List[GuildID]:
        return list(self._guilds)

    def set_option(self, guild_id: GuildID, name: str, raw: str) -> SettingUpdate:
        """
        Apply raw user input to one option and persist on success.

        Raises:
            KeyError: If ``name`` is not in the option catalog.
        """
        result = self._options.set(self.get(guild_id), name, raw)
        if result.success:
            logger.info("[GUILD SETTINGS MANAGER] Guild %s set %s", guild_id, name)
            self.save(guild_id)
        return result

    def save(self, guild_id: GuildID) -> None:
        """Schedule a best-effort persist of one guild's settings."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("[GUILD SETTINGS MANAGER] Cannot persist guild %s: no running event loop", guild_id)
            return

        task = loop.create_task(self.persist_guild(guild_id))
        self._active_persists.add(task)

        def _cleanup(completed: asyncio.Task) -> None:
            self._active_persists.discard(completed)
            if completed.cancelled():
                return
            exc = completed.exception()
            if exc is not None:
                logger.error(
                    "[GUILD SETTINGS MANAGER] Failed to persist guild %s",
                    guild_id,
                    exc_info=(type(exc), exc, exc.__traceback__),
                )

        task.add_done_callback(_cleanup)

    async def persist_guild(self, guild_id: GuildID) -> None:
        """Write one guild's settings to the database now."""
        snapshot = copy.deepcopy(self.get(guild_id))
        async with self._connection.transaction() as conn:
            await self._repository.upsert(conn, guild_id, snapshot)
        logger.debug("[GUILD SETTINGS MANAGER] Persisted guild %s", guild_id)

    async def shutdown(self) -> None:
        """Await any pending persistence tasks."""
        pending = list(self._active_persists)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._active_persists.clear()
        logger.info("[GUILD SETTINGS MANAGER] Shutdown complete")


# Global guild settings manager instance
guild_settings_manager = GuildSettingsManager()
