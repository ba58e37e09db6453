"""
Moderation cog: /mute and /unmute slash commands.

Both commands hand the work to :class:`ModerationPipeline`, which answers
the invoker itself for every expected outcome (applied, refused, target
not found). This cog only validates command input and turns hard errors
into a generic ephemeral reply; the error is logged with its traceback.

Quick usage example
    # In your bot setup code
    from wardcord.bot.cogs import moderation_cmds
    moderation_cmds.setup(bot)

Permissions
- Both commands are guild-only and require Moderate Members. The check is
  repeated at runtime because server admins can override command defaults.
"""

from datetime import timedelta
from typing import Optional

import discord
from discord import Option
from discord.ext import commands

from wardcord.configuration.app_configuration import app_config
from wardcord.datatypes.discord_datatypes import ChannelID, GuildID, UserID
from wardcord.datatypes.errors import GatewayError, PipelineError
from wardcord.gateway.discord_gateway import DiscordGateway
from wardcord.moderation.audit_logger import AuditLogger
from wardcord.moderation.moderation_pipeline import ModerationPipeline, Responder
from wardcord.services.profiler import ProfilerFactory
from wardcord.settings.guild_settings_manager import guild_settings_manager
from wardcord.settings.options import settings_language
from wardcord.ui.messages import get_message
from wardcord.util.format_utils import parse_mute_duration
from wardcord.util.logger import get_logger

logger = get_logger("moderation_cog")


def create_pipeline(discord_bot_instance: discord.Bot) -> ModerationPipeline:
    """Wire a pipeline to a running bot using the app configuration."""
    gateway = DiscordGateway(discord_bot_instance, timedelta(days=app_config.max_timeout_days))
    return ModerationPipeline(
        identity=gateway,
        mutator=gateway,
        audit_logger=AuditLogger(gateway),
        settings_manager=guild_settings_manager,
        profiler_factory=ProfilerFactory(app_config.profiler_threshold_ms),
    )


def interaction_responder(ctx: discord.ApplicationContext) -> Responder:
    """Answer ``ctx`` with an embed, reporting platform failures as GatewayError."""

    async def respond(embed: discord.Embed) -> None:
        try:
            await ctx.respond(embed=embed)
        except discord.HTTPException as exc:
            raise GatewayError("Could not answer the interaction") from exc

    return respond


class ModerationCog(commands.Cog):
    """Slash commands that mute and unmute members."""

    def __init__(self, discord_bot_instance, pipeline: Optional[ModerationPipeline] = None):
        self.discord_bot_instance = discord_bot_instance
        self.pipeline = pipeline or create_pipeline(discord_bot_instance)
        logger.info("Moderation cog loaded")

    def _language(self, ctx: discord.ApplicationContext) -> str:
        if not ctx.guild_id:
            return settings_language({})
        return settings_language(guild_settings_manager.get(GuildID(ctx.guild_id)))

    async def _ensure_moderator(self, ctx: discord.ApplicationContext) -> bool:
        language = self._language(ctx)
        if not ctx.guild_id:
            await ctx.respond(get_message("guild_only", language), ephemeral=True)
            return False

        permissions = getattr(ctx.user, "guild_permissions", None)
        if not getattr(permissions, "moderate_members", False):
            await ctx.respond(get_message("missing_permission", language, permission="Moderate Members"), ephemeral=True)
            return False
        return True

    async def _report_failure(self, ctx: discord.ApplicationContext, command: str, error: PipelineError) -> None:
        logger.error("Moderation command /%s failed at %s: %s", command, error.stage, error, exc_info=error)
        try:
            await ctx.respond(get_message("command_failed", self._language(ctx)), ephemeral=True)
        except discord.HTTPException:
            logger.error("Failed to send error response to user.")

    @commands.slash_command(
        name="mute",
        description="Mute a member of this server.",
        contexts={discord.InteractionContextType.guild},
    )
    @discord.default_permissions(moderate_members=True)
    async def mute(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The member to mute.", required=True),  # type: ignore
        reason: Option(str, "Reason for the mute.", required=False, default=None),  # type: ignore
        duration: Option(str, "How long, e.g. 30m, 1h30m, 2d or permanent.", required=False, default=None),  # type: ignore
    ) -> None:
        """Mute ``user`` for ``duration`` (the guild default when omitted)."""
        if not await self._ensure_moderator(ctx):
            return

        mute_duration = None
        if duration:
            try:
                mute_duration = parse_mute_duration(duration)
            except ValueError:
                await ctx.respond(get_message("invalid_duration", self._language(ctx), value=duration), ephemeral=True)
                return

        try:
            await self.pipeline.mute(
                GuildID(ctx.guild_id),
                ChannelID(ctx.channel_id),
                UserID(ctx.user.id),
                UserID(user.id),
                interaction_responder(ctx),
                reason=reason,
                duration=mute_duration,
            )
        except PipelineError as exc:
            await self._report_failure(ctx, "mute", exc)

    @commands.slash_command(
        name="unmute",
        description="Unmute a member of this server.",
        contexts={discord.InteractionContextType.guild},
    )
    @discord.default_permissions(moderate_members=True)
    async def unmute(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The member to unmute.", required=True),  # type: ignore
        reason: Option(str, "Reason for the unmute.", required=False, default=None),  # type: ignore
    ) -> None:
        """Lift the mute of ``user``."""
        if not await self._ensure_moderator(ctx):
            return

        try:
            await self.pipeline.unmute(
                GuildID(ctx.guild_id),
                ChannelID(ctx.channel_id),
                UserID(ctx.user.id),
                UserID(user.id),
                interaction_responder(ctx),
                reason=reason,
            )
        except PipelineError as exc:
            await self._report_failure(ctx, "unmute", exc)


def setup(discord_bot_instance, pipeline: Optional[ModerationPipeline] = None):
    """Add the moderation cog to the supplied Discord bot instance."""
    discord_bot_instance.add_cog(ModerationCog(discord_bot_instance, pipeline))
