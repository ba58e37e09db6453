"""Event listener Cog for Wardcord.

This cog handles the bot lifecycle (on_ready) and members joining or leaving:
roles are remembered on leave, returned on rejoin when the guild asks for it,
and a welcome message is posted to the public feedback channel.
"""

import aiosqlite
import discord
from discord.ext import commands

from wardcord.datatypes.discord_datatypes import GuildID, RoleID, UserID, UserProfile
from wardcord.datatypes.errors import GatewayError
from wardcord.gateway.discord_gateway import DiscordGateway
from wardcord.gateway.protocols import MessageDispatcher
from wardcord.services.member_join import MemberJoinService
from wardcord.ui.action_embed import create_welcome_embed
from wardcord.ui.messages import get_message
from wardcord.util.logger import get_logger

logger = get_logger("events_listener_cog")


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and member join/leave handlers."""

    def __init__(
        self,
        discord_bot_instance,
        service: MemberJoinService | None = None,
        dispatcher: MessageDispatcher | None = None,
    ):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        service:
            Member join decisions; a database-backed one is built when omitted.
        dispatcher:
            Sends the welcome embed; defaults to a gateway over the bot.
        """
        self.bot = discord_bot_instance
        self.service = service or MemberJoinService()
        self.dispatcher = dispatcher or DiscordGateway(discord_bot_instance)
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        if self.bot.user:
            logger.info("Bot connected as %s (ID: %s)", self.bot.user, self.bot.user.id)
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

    @commands.Cog.listener(name="on_member_remove")
    async def on_member_remove(self, member: discord.Member):
        """Remember the roles ``member`` held; @everyone and integration roles are skipped."""
        role_ids = [RoleID(role.id) for role in member.roles if not role.is_default() and not role.managed]
        try:
            await self.service.remember_roles(GuildID(member.guild.id), UserID(member.id), role_ids)
        except aiosqlite.Error as exc:
            logger.error("Failed to store roles of %s in guild %s", member.id, member.guild.id, exc_info=exc)

    @commands.Cog.listener(name="on_member_join")
    async def on_member_join(self, member: discord.Member):
        guild_id = GuildID(member.guild.id)
        await self._return_roles(member, guild_id)
        await self._send_welcome(member, guild_id)

    async def _return_roles(self, member: discord.Member, guild_id: GuildID) -> None:
        try:
            role_ids = await self.service.roles_to_return(guild_id, UserID(member.id))
        except aiosqlite.Error as exc:
            logger.error("Failed to load roles of %s in guild %s", member.id, guild_id, exc_info=exc)
            return

        # Roles deleted since the member left, or above the bot, cannot be given back
        roles = [member.guild.get_role(role_id.to_int()) for role_id in role_ids]
        roles = [role for role in roles if role is not None and role.is_assignable()]
        if not roles:
            return

        reason = get_message("roles_returned_reason", self.service.language(guild_id))
        try:
            await member.add_roles(*roles, reason=reason)
        except discord.HTTPException as exc:
            logger.warning("Could not return roles to %s in guild %s: %s", member.id, guild_id, exc)
            return
        logger.info("Returned %d role(s) to %s in guild %s", len(roles), member.id, guild_id)

    async def _send_welcome(self, member: discord.Member, guild_id: GuildID) -> None:
        guild = member.guild
        text = self.service.welcome_message(guild_id, str(member), guild.name)
        if text is None:
            return

        icon_url = guild.icon.url if guild.icon else None
        embed = create_welcome_embed(text, UserProfile.from_discord(member), guild.name, icon_url, member.joined_at)
        try:
            await self.dispatcher.send_embed(self.service.welcome_channel(guild_id), embed)
        except GatewayError as exc:
            logger.warning("Could not welcome %s in guild %s: %s", member.id, guild_id, exc)


def setup(discord_bot_instance):
    """Register the EventsListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    """
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance))
