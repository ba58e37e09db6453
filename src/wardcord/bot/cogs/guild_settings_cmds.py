"""
Settings cog: view and change the per-guild settings.

This cog exposes one slash command group:
- /settings list: every setting with its current value
- /settings set <option> <value>: parse and store a new value

All commands require the Manage Server permission. Responses are ephemeral
to avoid leaking configuration in public channels.

Quick usage example
    # In your bot setup code
    from wardcord.bot.cogs import guild_settings_cmds
    guild_settings_cmds.setup(bot)
"""

import discord
from discord import Option
from discord.ext import commands

from wardcord.datatypes.discord_datatypes import GuildID
from wardcord.settings.guild_settings import guild_options
from wardcord.settings.guild_settings_manager import guild_settings_manager
from wardcord.settings.options import settings_language
from wardcord.ui.action_embed import FAILURE_COLOR, SUCCESS_COLOR
from wardcord.ui.messages import get_message
from wardcord.util.logger import get_logger

logger = get_logger("settings_cog")


def build_settings_embed(guild_id: GuildID) -> discord.Embed:
    """List every option of ``guild_id`` with its display value."""
    settings = guild_settings_manager.get(guild_id)
    language = settings_language(settings)
    lines = [f"**{name}**: {guild_options.display(settings, name)}" for name in guild_options.names()]
    return discord.Embed(
        title=get_message("settings_list_title", language),
        description="\n".join(lines),
        color=SUCCESS_COLOR,
    )


class GuildSettingsCog(commands.Cog):
    """Per-guild settings commands backed by the guild settings manager."""

    settings = discord.SlashCommandGroup(
        "settings",
        "View or change the settings of this server.",
        default_member_permissions=discord.Permissions(manage_guild=True),
        contexts={discord.InteractionContextType.guild},
    )

    def __init__(self, discord_bot_instance):
        self.discord_bot_instance = discord_bot_instance
        logger.info("Settings cog loaded")

    async def _ensure_manager(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond(get_message("guild_only"), ephemeral=True)
            return False

        permissions = getattr(ctx.user, "guild_permissions", None)
        if not getattr(permissions, "manage_guild", False):
            language = settings_language(guild_settings_manager.get(GuildID(ctx.guild_id)))
            await ctx.respond(get_message("missing_permission", language, permission="Manage Server"), ephemeral=True)
            return False
        return True

    @settings.command(name="list", description="Show every setting of this server.")
    async def settings_list(self, ctx: discord.ApplicationContext):
        if not await self._ensure_manager(ctx):
            return
        await ctx.respond(embed=build_settings_embed(GuildID(ctx.guild_id)), ephemeral=True)

    @settings.command(name="set", description="Change one setting of this server.")
    async def settings_set(
        self,
        ctx: discord.ApplicationContext,
        option: Option(str, "Setting to change.", choices=list(guild_options.names())),  # type: ignore
        value: Option(str, "New value.", required=True),  # type: ignore
    ):
        """Validate ``value`` with the option's parser; invalid input leaves the setting unchanged."""
        if not await self._ensure_manager(ctx):
            return

        guild_id = GuildID(ctx.guild_id)
        settings = guild_settings_manager.get(guild_id)
        if option not in guild_options:
            await ctx.respond(get_message("unknown_setting", settings_language(settings), name=option), ephemeral=True)
            return

        result = guild_settings_manager.set_option(guild_id, option, value)
        # Language may have just changed; answer in the new one.
        language = settings_language(settings)
        if not result.success:
            embed = discord.Embed(description=result.error, color=FAILURE_COLOR)
        else:
            text = get_message("setting_updated", language, name=option, value=guild_options.display(settings, option))
            embed = discord.Embed(description=text, color=SUCCESS_COLOR)
        await ctx.respond(embed=embed, ephemeral=True)


def setup(discord_bot_instance):
    """Add the settings cog to the supplied Discord bot instance."""
    discord_bot_instance.add_cog(GuildSettingsCog(discord_bot_instance))
