"""
py-cord implementation of the identity, member-mutation and message-dispatch
capabilities.

Cached objects are used when the client has them; otherwise the REST API is
queried. Every ``discord.HTTPException`` is re-raised as ``GatewayError``,
except a missing member, which is reported as ``None``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

import discord

from wardcord.datatypes.action_datatypes import INDEFINITE, MuteDeadline
from wardcord.datatypes.discord_datatypes import (
    ChannelID,
    Guild,
    GuildID,
    GuildMember,
    Role,
    UserID,
    UserProfile,
)
from wardcord.datatypes.errors import GatewayError
from wardcord.util.logger import get_logger

logger = get_logger("discord_gateway")


class DiscordGateway:
    """Adapter from a connected ``discord.Bot`` to the core's capabilities.

    Args:
        bot: The running client.
        max_timeout: Longest timeout the platform accepts. Indefinite mutes
            are applied as a timeout of this length.
    """

    def __init__(self, bot: discord.Bot, max_timeout: timedelta = timedelta(days=28)) -> None:
        self._bot = bot
        self._max_timeout = max_timeout

    async def _guild(self, guild_id: GuildID) -> discord.Guild:
        guild = self._bot.get_guild(guild_id.to_int())
        if guild is not None:
            return guild
        try:
            return await self._bot.fetch_guild(guild_id.to_int())
        except discord.HTTPException as exc:
            raise GatewayError(f"Could not fetch guild {guild_id}") from exc

    async def _member(self, guild: discord.Guild, user_id: UserID) -> Optional[discord.Member]:
        member = guild.get_member(user_id.to_int())
        if member is not None:
            return member
        try:
            return await guild.fetch_member(user_id.to_int())
        except discord.NotFound:
            return None
        except discord.HTTPException as exc:
            raise GatewayError(f"Could not fetch member {user_id} of guild {guild.id}") from exc

    # ---------------------------------------------------------------- identity
    async def fetch_current_user(self) -> UserProfile:
        if self._bot.user is None:
            raise GatewayError("The client is not logged in")
        return UserProfile.from_discord(self._bot.user)

    async def fetch_user(self, user_id: UserID) -> UserProfile:
        user = self._bot.get_user(user_id.to_int())
        if user is None:
            try:
                user = await self._bot.fetch_user(user_id.to_int())
            except discord.HTTPException as exc:
                raise GatewayError(f"Could not fetch user {user_id}") from exc
        return UserProfile.from_discord(user)

    async def fetch_guild(self, guild_id: GuildID) -> Guild:
        return Guild.from_discord(await self._guild(guild_id))

    async def fetch_roles(self, guild_id: GuildID) -> List[Role]:
        guild = await self._guild(guild_id)
        roles = guild.roles
        if not roles:
            try:
                roles = await guild.fetch_roles()
            except discord.HTTPException as exc:
                raise GatewayError(f"Could not fetch roles of guild {guild_id}") from exc
        return [Role.from_discord(role) for role in roles]

    async def fetch_member(self, guild_id: GuildID, user_id: UserID) -> Optional[GuildMember]:
        member = await self._member(await self._guild(guild_id), user_id)
        return GuildMember.from_discord(member) if member is not None else None

    # ---------------------------------------------------------------- mutation
    async def set_communication_disabled_until(
        self, guild_id: GuildID, user_id: UserID, until: MuteDeadline, reason: str
    ) -> None:
        guild = await self._guild(guild_id)
        member = await self._member(guild, user_id)
        if member is None:
            raise GatewayError(f"Member {user_id} left guild {guild_id} before the action was applied")

        if until is INDEFINITE:
            until = discord.utils.utcnow() + self._max_timeout
            logger.debug("[DISCORD GATEWAY] Indefinite mute of %s applied as %s timeout", user_id, self._max_timeout)

        try:
            await member.timeout(until, reason=reason)
        except discord.HTTPException as exc:
            raise GatewayError(f"Could not update timeout of member {user_id}") from exc

    # ---------------------------------------------------------------- dispatch
    async def send_embed(self, channel_id: ChannelID, embed: discord.Embed) -> None:
        channel = self._bot.get_channel(channel_id.to_int())
        try:
            if channel is None:
                channel = await self._bot.fetch_channel(channel_id.to_int())
            if not isinstance(channel, discord.abc.Messageable):
                raise GatewayError(f"Channel {channel_id} cannot receive messages")
            await channel.send(embed=embed)
        except discord.HTTPException as exc:
            raise GatewayError(f"Could not send to channel {channel_id}") from exc
