"""
Action types and data structures for mute/unmute actions.

This module defines the ActionType enum, the duration boundary type used by
mutes, and the transient records produced while an action runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Literal, Optional, Union

import discord

from wardcord.datatypes.discord_datatypes import ChannelID, GuildID, UserID, UserProfile


class ActionType(Enum):
    """Enumeration of supported moderation actions."""

    MUTE = "mute"
    UNMUTE = "unmute"

    def __str__(self) -> str:
        return self.value


class Indefinite(Enum):
    """Marker for a mute that never expires on its own."""

    INDEFINITE = "indefinite"

    def __repr__(self) -> str:
        return "INDEFINITE"


INDEFINITE = Indefinite.INDEFINITE

MuteDuration = Union[timedelta, Literal[Indefinite.INDEFINITE]]
# What the member-mutation capability receives: a deadline, no expiry, or None to lift the mute.
MuteDeadline = Union[datetime, Literal[Indefinite.INDEFINITE], None]


def normalize_duration(duration: MuteDuration) -> MuteDuration:
    """Map the legacy negative-duration sentinel onto INDEFINITE."""
    if duration is INDEFINITE:
        return INDEFINITE
    if duration < timedelta(0):
        return INDEFINITE
    return duration


def compute_deadline(now: datetime, duration: MuteDuration) -> MuteDeadline:
    """Return when a mute of ``duration`` started at ``now`` ends."""
    duration = normalize_duration(duration)
    if duration is INDEFINITE:
        return INDEFINITE
    return now + duration


@dataclass(frozen=True, slots=True)
class ModerationAction:
    """A mute or unmute that has been applied.

    Attributes:
        kind: MUTE or UNMUTE.
        guild_id: Guild the action happened in.
        actor_id: Member who issued the action.
        target_id: Member the action was applied to.
        reason: Free-text reason given by the actor.
        applied_until: Mute deadline; INDEFINITE for no expiry, None for an unmute.
    """

    kind: ActionType
    guild_id: GuildID
    actor_id: UserID
    target_id: UserID
    reason: str
    applied_until: MuteDeadline = None


@dataclass(frozen=True, slots=True)
class AuditRecord:
    """Ephemeral description of an action, rendered once per fan-out."""

    title: str
    description: str
    subject: UserProfile
    actor: UserProfile
    color: discord.Color
    origin_channel: ChannelID


class ActionOutcome(Enum):
    """How a pipeline invocation ended when it did not hit a hard error."""

    APPLIED = "applied"
    DENIED = "denied"
    TARGET_NOT_FOUND = "target_not_found"


@dataclass(frozen=True, slots=True)
class ActionResult:
    outcome: ActionOutcome
    action: Optional[ModerationAction] = None
    deny_reason: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.outcome is ActionOutcome.APPLIED
