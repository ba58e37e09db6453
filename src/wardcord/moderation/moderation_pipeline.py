"""
Mute and unmute flows, from user resolution to the reply.

Each invocation runs these stages in order:

    resolve_users -> fetch_settings -> fetch_target -> check_interaction
    -> apply_mute / apply_unmute -> log_action -> respond

A target that is not a member and a refused interaction are ordinary
outcomes: the invoker gets a red reply and the flow stops without touching
the member. Backend failures abort the flow with :class:`PipelineError`
naming the stage; the reply is then left to the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Awaitable, Callable, Optional

import discord

from wardcord.datatypes.action_datatypes import (
    INDEFINITE,
    ActionOutcome,
    ActionResult,
    ActionType,
    ModerationAction,
    MuteDeadline,
    MuteDuration,
    compute_deadline,
)
from wardcord.datatypes.discord_datatypes import ChannelID, GuildID, UserID, UserProfile
from wardcord.datatypes.errors import AuditRenderError, GatewayError, PipelineError
from wardcord.datatypes.interaction_datatypes import Denied, Failed
from wardcord.gateway.protocols import IdentitySource, MemberMutator
from wardcord.moderation.audit_logger import AuditLogger
from wardcord.moderation.interaction_checker import InteractionChecker
from wardcord.services.profiler import Profiler, ProfilerFactory
from wardcord.settings.guild_settings import GuildSettings
from wardcord.settings.guild_settings_manager import GuildSettingsManager
from wardcord.settings.options import settings_language
from wardcord.ui.action_embed import FAILURE_COLOR, SUCCESS_COLOR, create_feedback_embed
from wardcord.ui.messages import get_message
from wardcord.util.format_utils import format_deadline
from wardcord.util.logger import get_logger

logger = get_logger("moderation_pipeline")

Responder = Callable[[discord.Embed], Awaitable[None]]

ACTION_TITLES = {ActionType.MUTE: "user_muted", ActionType.UNMUTE: "user_unmuted"}


def action_reason(actor: UserProfile, reason: str) -> str:
    """Reason recorded in the platform's audit log for a member update."""
    return f"({actor.tag}) {reason}"


def describe_action(action: ModerationAction, language: str) -> str:
    """Audit description of an applied action: its reason and, for mutes, its expiry."""
    lines = [get_message("description_action_reason", language, reason=action.reason)]
    if action.kind is ActionType.MUTE:
        if action.applied_until is INDEFINITE or action.applied_until is None:
            lines.append(get_message("description_action_never_expires", language))
        else:
            lines.append(
                get_message("description_action_expires_at", language, expires=format_deadline(action.applied_until))
            )
    return "\n".join(lines)


class ModerationPipeline:
    """
    Runs mute and unmute requests against the platform capabilities.

    Args:
        identity: Source of users, guilds, roles and members.
        mutator: Applies and lifts mutes.
        audit_logger: Fans applied actions out to the feedback channels.
        settings_manager: Owner of the guild settings mappings.
        profiler_factory: Creates one profiler per invocation.
        clock: Returns the current aware UTC time.
        checker: Interaction checker; built from ``identity`` when omitted.
    """

    def __init__(
        self,
        identity: IdentitySource,
        mutator: MemberMutator,
        audit_logger: AuditLogger,
        settings_manager: GuildSettingsManager,
        profiler_factory: ProfilerFactory,
        clock: Callable[[], datetime] = discord.utils.utcnow,
        checker: Optional[InteractionChecker] = None,
    ) -> None:
        self._identity = identity
        self._mutator = mutator
        self._audit_logger = audit_logger
        self._settings_manager = settings_manager
        self._profiler_factory = profiler_factory
        self._clock = clock
        self._checker = checker or InteractionChecker(identity)

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    async def mute(
        self,
        guild_id: GuildID,
        channel_id: ChannelID,
        actor_id: UserID,
        target_id: UserID,
        respond: Responder,
        reason: Optional[str] = None,
        duration: Optional[MuteDuration] = None,
    ) -> ActionResult:
        """
        Mute ``target_id`` for ``duration``.

        A missing reason or duration is taken from the guild settings. A
        negative duration means the mute never expires on its own.

        Raises:
            PipelineError: If a backend call fails or the audit record cannot be rendered.
        """
        return await self._execute(
            ActionType.MUTE, guild_id, channel_id, actor_id, target_id, respond, reason, duration
        )

    async def unmute(
        self,
        guild_id: GuildID,
        channel_id: ChannelID,
        actor_id: UserID,
        target_id: UserID,
        respond: Responder,
        reason: Optional[str] = None,
    ) -> ActionResult:
        """Lift the mute of ``target_id``. Raises PipelineError like :meth:`mute`."""
        return await self._execute(ActionType.UNMUTE, guild_id, channel_id, actor_id, target_id, respond, reason, None)

    async def _execute(
        self,
        kind: ActionType,
        guild_id: GuildID,
        channel_id: ChannelID,
        actor_id: UserID,
        target_id: UserID,
        respond: Responder,
        reason: Optional[str],
        duration: Optional[MuteDuration],
    ) -> ActionResult:
        profiler = self._profiler_factory.create()
        profiler.push(kind.value)
        try:
            result = await self._run(
                profiler, kind, guild_id, channel_id, actor_id, target_id, respond, reason, duration
            )
        except PipelineError as exc:
            logger.warning("[MODERATION PIPELINE] %s of %s in guild %s failed: %s", kind.value, target_id, guild_id, exc)
            profiler.report_with_success()
            raise
        return profiler.report_with_result(result)

    async def _run(
        self,
        profiler: Profiler,
        kind: ActionType,
        guild_id: GuildID,
        channel_id: ChannelID,
        actor_id: UserID,
        target_id: UserID,
        respond: Responder,
        reason: Optional[str],
        duration: Optional[MuteDuration],
    ) -> ActionResult:
        profiler.push("resolve_users")
        try:
            current_user = await self._identity.fetch_current_user()
            actor = await self._identity.fetch_user(actor_id)
        except GatewayError as exc:
            raise PipelineError("resolve_users", str(exc)) from exc
        profiler.pop()

        profiler.push("fetch_settings")
        settings = self._settings_manager.get(guild_id)
        language = settings_language(settings)
        if reason is None or not reason.strip():
            reason = GuildSettings.DEFAULT_REASON.get(settings)
        if kind is ActionType.MUTE and duration is None:
            duration = GuildSettings.DEFAULT_MUTE_DURATION.get(settings)
        profiler.pop()

        profiler.push("fetch_target")
        try:
            target_member = await self._identity.fetch_member(guild_id, target_id)
            # Unknown user ids are never members; only members get a profile lookup
            target = await self._identity.fetch_user(target_id) if target_member is not None else None
        except GatewayError as exc:
            raise PipelineError("fetch_target", str(exc)) from exc
        profiler.pop()

        if target_member is None:
            logger.debug("[MODERATION PIPELINE] %s is not a member of guild %s", target_id, guild_id)
            await self._respond(
                profiler, respond, create_feedback_embed(get_message("user_not_found", language), current_user, FAILURE_COLOR)
            )
            return ActionResult(ActionOutcome.TARGET_NOT_FOUND)

        profiler.push("check_interaction")
        check = await self._checker.check(guild_id, actor_id, target_member, action=kind, language=language)
        profiler.pop()

        if isinstance(check, Failed):
            raise PipelineError("check_interaction", str(check.error)) from check.error
        if isinstance(check, Denied):
            logger.debug("[MODERATION PIPELINE] %s of %s denied: %s", kind.value, target_id, check.reason)
            await self._respond(profiler, respond, create_feedback_embed(check.reason, current_user, FAILURE_COLOR))
            return ActionResult(ActionOutcome.DENIED, deny_reason=check.reason)

        until: MuteDeadline = compute_deadline(self._clock(), duration) if kind is ActionType.MUTE else None

        profiler.push(f"apply_{kind.value}")
        try:
            await self._mutator.set_communication_disabled_until(guild_id, target_id, until, action_reason(actor, reason))
        except GatewayError as exc:
            raise PipelineError(f"apply_{kind.value}", str(exc)) from exc
        profiler.pop()

        action = ModerationAction(kind, guild_id, actor_id, target_id, reason, until)
        logger.info(
            "[MODERATION PIPELINE] %s applied to %s in guild %s by %s (until %r)",
            kind.value,
            target_id,
            guild_id,
            actor_id,
            until,
        )

        title = get_message(ACTION_TITLES[kind], language, user=target.tag)

        profiler.push("log_action")
        try:
            self._audit_logger.log_action(
                settings,
                channel_id,
                actor,
                title,
                describe_action(action, language),
                target,
                FAILURE_COLOR if kind is ActionType.MUTE else SUCCESS_COLOR,
                is_public=GuildSettings.PUBLIC_MODERATION_LOGS.get(settings),
            )
        except AuditRenderError as exc:
            raise PipelineError("log_action", str(exc)) from exc
        profiler.pop()

        await self._respond(profiler, respond, create_feedback_embed(title, target, SUCCESS_COLOR))
        return ActionResult(ActionOutcome.APPLIED, action=action)

    @staticmethod
    async def _respond(profiler: Profiler, respond: Responder, embed: discord.Embed) -> None:
        profiler.push("respond")
        try:
            await respond(embed)
        except GatewayError as exc:
            raise PipelineError("respond", str(exc)) from exc
        profiler.pop()
