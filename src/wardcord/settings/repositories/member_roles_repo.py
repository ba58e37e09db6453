"""
Repository for the member_roles table.
"""

from __future__ import annotations

import json
from typing import Iterable, List

import aiosqlite

from wardcord.datatypes.discord_datatypes import GuildID, RoleID, UserID
from wardcord.util.logger import get_logger

logger = get_logger("member_roles_repo")


class MemberRolesRepository:
    """Stores the role ids a member held when they left a guild."""

    async def get(self, conn: aiosqlite.Connection, guild_id: GuildID, user_id: UserID) -> List[RoleID]:
        async with conn.execute(
            "SELECT role_ids FROM member_roles WHERE guild_id = ? AND user_id = ?",
            (guild_id.to_int(), user_id.to_int()),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return []
        try:
            stored = json.loads(row[0])
            return [RoleID(role_id) for role_id in stored]
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning("[MEMBER ROLES REPO] Roles of %s in guild %s are corrupt; ignoring", user_id, guild_id)
            return []

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: GuildID, user_id: UserID, role_ids: Iterable[RoleID]
    ) -> None:
        await conn.execute(
            """
            INSERT INTO member_roles (guild_id, user_id, role_ids) VALUES (?, ?, ?)
            ON CONFLICT(guild_id, user_id) DO UPDATE SET
                role_ids   = excluded.role_ids,
                updated_at = CURRENT_TIMESTAMP
            """,
            (guild_id.to_int(), user_id.to_int(), json.dumps([role_id.to_int() for role_id in role_ids])),
        )
