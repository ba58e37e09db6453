"""
Role-hierarchy rules deciding whether one member may act on another.

:func:`check_interaction` is a pure function over data the caller already
fetched. :class:`InteractionChecker` does those fetches and then defers to it.

Rules, first match wins:

1. acting on yourself is denied;
2. acting on the bot is denied;
3. acting on the guild owner is denied;
4. denied unless the bot's highest role is strictly above the target's;
5. the guild owner may act on anyone left;
6. denied unless the actor's highest role is strictly above the target's.

A member without roles has highest position 0. Equal positions deny.
"""

from __future__ import annotations

from typing import Dict, Iterable, Sequence

from wardcord.datatypes.action_datatypes import ActionType
from wardcord.datatypes.discord_datatypes import Guild, GuildID, GuildMember, Role, RoleID, UserID
from wardcord.datatypes.errors import GatewayError, MissingDataError
from wardcord.datatypes.interaction_datatypes import ALLOWED, Denied, Failed, InteractionCheck
from wardcord.gateway.protocols import IdentitySource
from wardcord.ui.messages import DEFAULT_LANGUAGE, get_message
from wardcord.util.logger import get_logger

logger = get_logger("interaction_checker")


def highest_position(roles_by_id: Dict[RoleID, Role], role_ids: Iterable[RoleID]) -> int:
    """Highest position among ``role_ids``; unknown ids are skipped, none gives 0."""
    return max((roles_by_id[role_id].position for role_id in role_ids if role_id in roles_by_id), default=0)


def check_interaction(
    guild: Guild,
    roles: Sequence[Role],
    bot_member: GuildMember,
    actor: GuildMember,
    target: GuildMember,
    *,
    action: ActionType = ActionType.MUTE,
    language: str = DEFAULT_LANGUAGE,
) -> InteractionCheck:
    for name, member in (("bot", bot_member), ("actor", actor), ("target", target)):
        if member.user_id is None:
            return Failed(MissingDataError(f"The {name} member has no user"))

    def deny(key: str) -> Denied:
        return Denied(get_message(key, language))

    if actor.user_id == target.user_id:
        return deny(f"user_cannot_{action.value}_themselves")
    if target.user_id == bot_member.user_id:
        return deny(f"user_cannot_{action.value}_bot")
    if target.user_id == guild.owner_id:
        return deny(f"user_cannot_{action.value}_owner")

    roles_by_id = {role.id: role for role in roles}
    target_position = highest_position(roles_by_id, target.role_ids)

    if target_position >= highest_position(roles_by_id, bot_member.role_ids):
        return deny(f"bot_cannot_{action.value}_target")

    if actor.user_id == guild.owner_id:
        return ALLOWED

    if target_position >= highest_position(roles_by_id, actor.role_ids):
        return deny(f"user_cannot_{action.value}_target")
    return ALLOWED


class InteractionChecker:
    """Fetches what :func:`check_interaction` needs from an identity source."""

    def __init__(self, identity: IdentitySource) -> None:
        self._identity = identity

    async def check(
        self,
        guild_id: GuildID,
        actor_id: UserID,
        target: GuildMember,
        *,
        action: ActionType = ActionType.MUTE,
        language: str = DEFAULT_LANGUAGE,
    ) -> InteractionCheck:
        """
        Decide whether ``actor_id`` may apply ``action`` to ``target``.

        Returns ``Failed`` when any lookup fails or when the bot or the actor
        is not a member of the guild.
        """
        if actor_id == target.user_id:
            return Denied(get_message(f"user_cannot_{action.value}_themselves", language))

        try:
            current_user = await self._identity.fetch_current_user()
            guild = await self._identity.fetch_guild(guild_id)
            bot_member = await self._identity.fetch_member(guild_id, current_user.id)
            if bot_member is None:
                return Failed(MissingDataError(f"The bot is not a member of guild {guild_id}"))
            roles = await self._identity.fetch_roles(guild_id)
            actor = await self._identity.fetch_member(guild_id, actor_id)
            if actor is None:
                return Failed(MissingDataError(f"Actor {actor_id} is not a member of guild {guild_id}"))
        except GatewayError as exc:
            logger.debug("[INTERACTION CHECKER] Lookup failed for guild %s: %s", guild_id, exc)
            return Failed(exc)

        return check_interaction(guild, roles, bot_member, actor, target, action=action, language=language)
