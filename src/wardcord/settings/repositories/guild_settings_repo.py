"""
Repository for the guild_settings table.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import aiosqlite

from wardcord.datatypes.discord_datatypes import GuildID
from wardcord.util.logger import get_logger

logger = get_logger("guild_settings_repo")


def _decode(guild_id: int, raw: str) -> Dict[str, Any] | None:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("[GUILD SETTINGS REPO] Settings of guild %s are not valid JSON; ignoring", guild_id)
        return None
    if not isinstance(value, dict):
        logger.warning("[GUILD SETTINGS REPO] Settings of guild %s are not an object; ignoring", guild_id)
        return None
    return value


class GuildSettingsRepository:
    """CRUD for the guild_settings table."""

    async def get(self, conn: aiosqlite.Connection, guild_id: GuildID) -> Dict[str, Any] | None:
        async with conn.execute(
            "SELECT settings FROM guild_settings WHERE guild_id = ?",
            (guild_id.to_int(),),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None
        return _decode(guild_id.to_int(), row[0])

    async def get_all(self, conn: aiosqlite.Connection) -> Dict[GuildID, Dict[str, Any]]:
        async with conn.execute("SELECT guild_id, settings FROM guild_settings") as cursor:
            rows = await cursor.fetchall()

        result: Dict[GuildID, Dict[str, Any]] = {}
        for guild_id, raw in rows:
            settings = _decode(guild_id, raw)
            if settings is not None:
                result[GuildID(guild_id)] = settings
        return result

    async def upsert(self, conn: aiosqlite.Connection, guild_id: GuildID, settings: Dict[str, Any]) -> None:
        await conn.execute(
            """
            INSERT INTO guild_settings (guild_id, settings) VALUES (?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
                settings   = excluded.settings,
                updated_at = CURRENT_TIMESTAMP
            """,
            (guild_id.to_int(), json.dumps(settings, ensure_ascii=False)),
        )
