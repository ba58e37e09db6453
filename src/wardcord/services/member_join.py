"""
Member join handling: remembered roles and the welcome message.

When a member leaves, the roles they held are stored. When they join again
and the guild has ``return_roles_on_rejoin`` enabled, those roles are handed
back. A welcome message goes to the public feedback channel unless that
channel is unset or ``welcome_message`` is turned off.

Welcome templates use ``{0}`` for the member's tag and ``{1}`` for the guild
name; any other braces are left as typed.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from wardcord.database.db_connection import ConnectionManager, db_connection
from wardcord.datatypes.discord_datatypes import ChannelID, GuildID, RoleID, UserID
from wardcord.settings.guild_settings import GuildSettings
from wardcord.settings.guild_settings_manager import GuildSettingsManager, guild_settings_manager
from wardcord.settings.options import settings_language
from wardcord.settings.repositories.member_roles_repo import MemberRolesRepository
from wardcord.ui.messages import get_message
from wardcord.util.logger import get_logger

logger = get_logger("member_join")

DISABLED_WORDS = frozenset({"off", "disable", "disabled"})
DEFAULT_WORDS = frozenset({"default", "reset"})

_PLACEHOLDER = re.compile(r"\{([01])\}")


def welcome_template(settings: Dict[str, Any]) -> Optional[str]:
    """The guild's welcome template, or None when nothing should be sent."""
    if GuildSettings.PUBLIC_FEEDBACK_CHANNEL.get(settings).to_int() == 0:
        return None

    message = GuildSettings.WELCOME_MESSAGE.get(settings)
    keyword = message.strip().lower()
    if keyword in DISABLED_WORDS:
        return None
    if keyword in DEFAULT_WORDS:
        return get_message("default_welcome_message", settings_language(settings))
    return message


def render_welcome(template: str, user_tag: str, guild_name: str) -> str:
    values = (user_tag, guild_name)
    return _PLACEHOLDER.sub(lambda match: values[int(match.group(1))], template)


class MemberJoinService:
    """
    Per-guild decisions for members joining and leaving.

    Args:
        connection: Database holding the remembered roles.
        settings_manager: Owner of the guild settings mappings.
        repository: Row access for remembered roles.
    """

    def __init__(
        self,
        connection: ConnectionManager = db_connection,
        settings_manager: GuildSettingsManager = guild_settings_manager,
        repository: MemberRolesRepository | None = None,
    ) -> None:
        self._connection = connection
        self._settings_manager = settings_manager
        self._repository = repository or MemberRolesRepository()

    async def remember_roles(self, guild_id: GuildID, user_id: UserID, role_ids: Iterable[RoleID]) -> None:
        """Store the roles ``user_id`` held when leaving ``guild_id``."""
        if not self._connection.is_open:
            logger.warning("[MEMBER JOIN] Database closed; roles of %s in guild %s not stored", user_id, guild_id)
            return

        role_ids = list(role_ids)
        async with self._connection.transaction() as conn:
            await self._repository.upsert(conn, guild_id, user_id, role_ids)
        logger.debug("[MEMBER JOIN] Stored %d role(s) of %s in guild %s", len(role_ids), user_id, guild_id)

    async def roles_to_return(self, guild_id: GuildID, user_id: UserID) -> List[RoleID]:
        """Roles to give back to a rejoining member; empty when the guild does not return roles."""
        if not GuildSettings.RETURN_ROLES_ON_REJOIN.get(self._settings_manager.get(guild_id)):
            return []
        if not self._connection.is_open:
            logger.warning("[MEMBER JOIN] Database closed; cannot return roles of %s in guild %s", user_id, guild_id)
            return []

        async with self._connection.read() as conn:
            return await self._repository.get(conn, guild_id, user_id)

    def welcome_channel(self, guild_id: GuildID) -> ChannelID:
        return GuildSettings.PUBLIC_FEEDBACK_CHANNEL.get(self._settings_manager.get(guild_id))

    def welcome_message(self, guild_id: GuildID, user_tag: str, guild_name: str) -> Optional[str]:
        template = welcome_template(self._settings_manager.get(guild_id))
        if template is None:
            return None
        return render_welcome(template, user_tag, guild_name)

    def language(self, guild_id: GuildID) -> str:
        return settings_language(self._settings_manager.get(guild_id))
