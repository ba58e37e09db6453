"""
Contracts of the platform capabilities the moderation core consumes.

Implementations raise :class:`~wardcord.datatypes.errors.GatewayError` for
transport or backend failures. A member that does not exist is not a
failure: ``fetch_member`` returns ``None`` for it.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

import discord

from wardcord.datatypes.action_datatypes import MuteDeadline
from wardcord.datatypes.discord_datatypes import (
    ChannelID,
    Guild,
    GuildID,
    GuildMember,
    Role,
    UserID,
    UserProfile,
)


class IdentitySource(Protocol):
    async def fetch_current_user(self) -> UserProfile: ...

    async def fetch_user(self, user_id: UserID) -> UserProfile: ...

    async def fetch_guild(self, guild_id: GuildID) -> Guild: ...

    async def fetch_roles(self, guild_id: GuildID) -> Sequence[Role]: ...

    async def fetch_member(self, guild_id: GuildID, user_id: UserID) -> Optional[GuildMember]: ...


class MemberMutator(Protocol):
    async def set_communication_disabled_until(
        self, guild_id: GuildID, user_id: UserID, until: MuteDeadline, reason: str
    ) -> None:
        """Mute until ``until``; INDEFINITE for no expiry, None lifts the mute."""
        ...


class MessageDispatcher(Protocol):
    async def send_embed(self, channel_id: ChannelID, embed: discord.Embed) -> None: ...
