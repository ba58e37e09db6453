"""
Audit fan-out of moderation actions to the guild's feedback channels.

A guild configures up to two channels: a public one (skipped for actions
logged as private) and a private one. Nothing is sent to the channel the
action came from, and the same channel never gets the record twice.

Sends are scheduled as background tasks. Their failures are logged and
never reach the caller.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Mapping, Set

import discord

from wardcord.datatypes.action_datatypes import AuditRecord
from wardcord.datatypes.discord_datatypes import ChannelID, UserProfile
from wardcord.gateway.protocols import MessageDispatcher
from wardcord.settings.guild_settings import GuildSettings
from wardcord.settings.options import settings_language
from wardcord.ui.action_embed import create_audit_embed
from wardcord.util.logger import get_logger

logger = get_logger("audit_logger")

UNSET_CHANNEL = ChannelID(0)


def _empty_or_equal(channel: ChannelID, other: ChannelID) -> bool:
    return channel == UNSET_CHANNEL or channel == other


def audit_targets(
    public_channel: ChannelID,
    private_channel: ChannelID,
    origin_channel: ChannelID,
    is_public: bool = True,
) -> List[ChannelID]:
    """Channels an audit record for an action issued in ``origin_channel`` goes to."""
    if _empty_or_equal(public_channel, origin_channel) and _empty_or_equal(private_channel, origin_channel):
        return []

    targets: List[ChannelID] = []
    if is_public and public_channel != UNSET_CHANNEL and public_channel != origin_channel:
        targets.append(public_channel)
    if private_channel != UNSET_CHANNEL and private_channel != public_channel and private_channel != origin_channel:
        targets.append(private_channel)
    return targets


class AuditLogger:
    def __init__(self, dispatcher: MessageDispatcher) -> None:
        self._dispatcher = dispatcher
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def log_action(
        self,
        settings: Mapping[str, Any],
        origin_channel: ChannelID,
        actor: UserProfile,
        title: str,
        description: str,
        subject: UserProfile,
        color: discord.Color,
        is_public: bool = True,
    ) -> List[ChannelID]:
        """
        Queue the audit record of an action for the guild's feedback channels.

        Returns the channels a send was scheduled for, without waiting for
        delivery. Must be called from a running event loop when any channel
        is configured.

        Raises:
            AuditRenderError: If the record cannot be rendered as an embed.
        """
        targets = audit_targets(
            GuildSettings.PUBLIC_FEEDBACK_CHANNEL.get(settings),
            GuildSettings.PRIVATE_FEEDBACK_CHANNEL.get(settings),
            origin_channel,
            is_public,
        )
        if not targets:
            return []

        record = AuditRecord(title, description, subject, actor, color, origin_channel)
        embed = create_audit_embed(record, settings_language(settings))

        for channel_id in targets:
            self._schedule(channel_id, embed)
        return targets

    def _schedule(self, channel_id: ChannelID, embed: discord.Embed) -> None:
        task = asyncio.get_running_loop().create_task(self._dispatcher.send_embed(channel_id, embed))
        self._pending.add(task)

        def _cleanup(completed: asyncio.Task) -> None:
            self._pending.discard(completed)
            if completed.cancelled():
                return
            exc = completed.exception()
            if exc is not None:
                logger.warning(
                    "[AUDIT LOGGER] Failed to send audit record to channel %s: %s",
                    channel_id,
                    exc,
                    exc_info=(type(exc), exc, exc.__traceback__),
                )

        task.add_done_callback(_cleanup)

    async def drain(self) -> None:
        """Wait for every queued send to finish; failures are already logged."""
        pending = list(self._pending)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
