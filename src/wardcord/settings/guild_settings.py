"""
The catalog of per-guild settings.

Every setting is a single process-wide descriptor on :class:`GuildSettings`;
``guild_options`` indexes the same descriptors by name for the settings
commands. The catalog is built once at import and never changes.
"""

from datetime import timedelta

from wardcord.datatypes.discord_datatypes import ChannelID
from wardcord.settings.options import (
    LANGUAGE_KEY,
    BoolOption,
    EnumOption,
    OptionRegistry,
    SnowflakeOption,
    StringOption,
    TimeSpanOption,
)
from wardcord.ui.messages import SUPPORTED_LANGUAGES


class GuildSettings:
    """Namespace of the setting descriptors."""

    LANGUAGE = EnumOption(LANGUAGE_KEY, "en", SUPPORTED_LANGUAGES)
    PUBLIC_FEEDBACK_CHANNEL = SnowflakeOption("public_feedback_channel", ChannelID)
    PRIVATE_FEEDBACK_CHANNEL = SnowflakeOption("private_feedback_channel", ChannelID)
    PUBLIC_MODERATION_LOGS = BoolOption("public_moderation_logs", True)
    DEFAULT_MUTE_DURATION = TimeSpanOption("default_mute_duration", timedelta(hours=1))
    DEFAULT_REASON = StringOption("default_reason", "No reason provided.")
    WELCOME_MESSAGE = StringOption("welcome_message", "default")
    RETURN_ROLES_ON_REJOIN = BoolOption("return_roles_on_rejoin", False)


guild_options = OptionRegistry(
    GuildSettings.LANGUAGE,
    GuildSettings.PUBLIC_FEEDBACK_CHANNEL,
    GuildSettings.PRIVATE_FEEDBACK_CHANNEL,
    GuildSettings.PUBLIC_MODERATION_LOGS,
    GuildSettings.DEFAULT_MUTE_DURATION,
    GuildSettings.DEFAULT_REASON,
    GuildSettings.WELCOME_MESSAGE,
    GuildSettings.RETURN_ROLES_ON_REJOIN,
)
