"""
Embed creation utilities for command feedback, audit records and welcome notices.

Titles are rendered as the embed's author line ("small title") with the
relevant user's avatar next to them.
"""

from datetime import datetime
from typing import Optional

import discord

from wardcord.datatypes.action_datatypes import AuditRecord
from wardcord.datatypes.discord_datatypes import UserProfile
from wardcord.datatypes.errors import AuditRenderError
from wardcord.ui.messages import DEFAULT_LANGUAGE, get_message

# Platform limits for the parts of an embed used here
MAX_AUTHOR_NAME_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 4096
MAX_FOOTER_LENGTH = 2048

FAILURE_COLOR = discord.Color.red()
SUCCESS_COLOR = discord.Color.green()


def _small_title(embed: discord.Embed, title: str, user: UserProfile) -> discord.Embed:
    if user.avatar_url:
        return embed.set_author(name=title, icon_url=user.avatar_url)
    return embed.set_author(name=title)


def create_feedback_embed(title: str, user: UserProfile, color: discord.Color) -> discord.Embed:
    """Short one-line embed answering the invoker of a command."""
    return _small_title(discord.Embed(color=color), title[:MAX_AUTHOR_NAME_LENGTH], user)


def create_audit_embed(record: AuditRecord, language: str = DEFAULT_LANGUAGE) -> discord.Embed:
    """
    Render an audit record.

    Raises:
        AuditRenderError: If the title or description exceeds the platform limits.
    """
    if len(record.title) > MAX_AUTHOR_NAME_LENGTH:
        raise AuditRenderError(f"Audit title is longer than {MAX_AUTHOR_NAME_LENGTH} characters")
    if len(record.description) > MAX_DESCRIPTION_LENGTH:
        raise AuditRenderError(f"Audit description is longer than {MAX_DESCRIPTION_LENGTH} characters")

    embed = discord.Embed(
        description=record.description,
        color=record.color,
        timestamp=discord.utils.utcnow(),
    )
    _small_title(embed, record.title, record.subject)

    footer = get_message("action_issued_by", language, user=record.actor.tag)[:MAX_FOOTER_LENGTH]
    if record.actor.avatar_url:
        embed.set_footer(text=footer, icon_url=record.actor.avatar_url)
    else:
        embed.set_footer(text=footer)
    return embed


def create_welcome_embed(
    text: str,
    user: UserProfile,
    guild_name: str,
    guild_icon_url: Optional[str] = None,
    joined_at: Optional[datetime] = None,
) -> discord.Embed:
    """Welcome notice for a member who just joined, with the guild as footer."""
    embed = _small_title(discord.Embed(color=SUCCESS_COLOR, timestamp=joined_at), text[:MAX_AUTHOR_NAME_LENGTH], user)
    footer = guild_name[:MAX_FOOTER_LENGTH]
    if guild_icon_url:
        return embed.set_footer(text=footer, icon_url=guild_icon_url)
    return embed.set_footer(text=footer)
