"""Tests for the role-hierarchy interaction rules."""

import pytest

from conftest import BOT_ID, GUILD_ID, MODERATOR_ID, OWNER_ID, TARGET_ID
from wardcord.datatypes.action_datatypes import ActionType
from wardcord.datatypes.discord_datatypes import Guild, GuildID, GuildMember, Role, RoleID, UserID
from wardcord.datatypes.errors import GatewayError, MissingDataError
from wardcord.datatypes.interaction_datatypes import ALLOWED, Allowed, Denied, Failed
from wardcord.moderation.interaction_checker import InteractionChecker, check_interaction, highest_position
from wardcord.ui.messages import get_message

GUILD = Guild(GuildID(100), UserID(1))


def member(user_id: int, *role_ids: int) -> GuildMember:
    return GuildMember(UserID(user_id), frozenset(RoleID(r) for r in role_ids))


def roles(**positions: int) -> list:
    """roles(r10=1, r11=5) -> [Role(10, 1), Role(11, 5)]"""
    return [Role(RoleID(int(name[1:])), position) for name, position in positions.items()]


class TestHighestPosition:
    def test_no_roles_is_zero(self):
        assert highest_position({}, []) == 0

    def test_unknown_roles_are_skipped(self):
        by_id = {role.id: role for role in roles(r10=3)}
        assert highest_position(by_id, [RoleID(10), RoleID(99)]) == 3

    def test_picks_maximum(self):
        by_id = {role.id: role for role in roles(r10=3, r11=7, r12=-2)}
        assert highest_position(by_id, [RoleID(10), RoleID(11), RoleID(12)]) == 7


class TestCheckInteraction:
    def test_self_action_is_denied(self):
        result = check_interaction(GUILD, [], member(2, 12), member(3), member(3))
        assert result == Denied(get_message("user_cannot_mute_themselves"))

    def test_targeting_bot_is_denied(self):
        result = check_interaction(GUILD, roles(r12=10), member(2, 12), member(3), member(2, 12))
        assert result == Denied(get_message("user_cannot_mute_bot"))

    def test_targeting_owner_is_denied_even_for_senior_actor(self):
        result = check_interaction(GUILD, roles(r11=50, r12=100), member(2, 12), member(3, 11), member(1))
        assert result == Denied(get_message("user_cannot_mute_owner"))

    def test_bot_must_outrank_target(self):
        all_roles = roles(r10=10, r12=10)
        result = check_interaction(GUILD, all_roles, member(2, 12), member(1), member(4, 10))
        assert result == Denied(get_message("bot_cannot_mute_target"))

    def test_bot_check_runs_before_owner_bypass(self):
        # Bot without roles cannot act on anyone, the owner included as actor
        result = check_interaction(GUILD, [], member(2), member(1), member(4))
        assert isinstance(result, Denied)
        assert result.reason == get_message("bot_cannot_mute_target")

    def test_owner_bypasses_actor_seniority(self):
        all_roles = roles(r10=5, r12=10)
        result = check_interaction(GUILD, all_roles, member(2, 12), member(1), member(4, 10))
        assert result is ALLOWED

    def test_actor_must_outrank_target(self):
        all_roles = roles(r10=5, r11=5, r12=10)
        result = check_interaction(GUILD, all_roles, member(2, 12), member(3, 11), member(4, 10))
        assert result == Denied(get_message("user_cannot_mute_target"))

    def test_senior_actor_is_allowed(self):
        all_roles = roles(r10=4, r11=5, r12=10)
        result = check_interaction(GUILD, all_roles, member(2, 12), member(3, 11), member(4, 10))
        assert isinstance(result, Allowed)

    @pytest.mark.parametrize(
        "actor_pos,target_pos,allowed",
        [(5, 4, True), (5, 5, False), (4, 5, False), (0, -1, True), (-3, -3, False), (-1, -2, True)],
    )
    def test_actor_seniority_for_any_positions(self, actor_pos, target_pos, allowed):
        all_roles = [Role(RoleID(11), actor_pos), Role(RoleID(10), target_pos), Role(RoleID(12), 1000)]
        result = check_interaction(GUILD, all_roles, member(2, 12), member(3, 11), member(4, 10))
        assert isinstance(result, Allowed) is allowed

    def test_unmute_uses_unmute_reasons(self):
        result = check_interaction(GUILD, [], member(2), member(3), member(3), action=ActionType.UNMUTE)
        assert result == Denied(get_message("user_cannot_unmute_themselves"))

    def test_reasons_are_localized(self):
        result = check_interaction(GUILD, [], member(2), member(3), member(3), language="ru")
        assert result == Denied(get_message("user_cannot_mute_themselves", "ru"))
        assert result.reason != get_message("user_cannot_mute_themselves", "en")

    def test_member_without_user_fails(self):
        result = check_interaction(GUILD, [], member(2), GuildMember(None), member(4))
        assert isinstance(result, Failed)
        assert isinstance(result.error, MissingDataError)


class TestInteractionChecker:
    @pytest.mark.asyncio
    async def test_allows_and_fetches_in_order(self, identity):
        checker = InteractionChecker(identity)

        result = await checker.check(GUILD_ID, MODERATOR_ID, identity.members[TARGET_ID])

        assert result is ALLOWED
        assert identity.calls == [
            "fetch_current_user",
            "fetch_guild",
            "fetch_member",
            "fetch_roles",
            "fetch_member",
        ]

    @pytest.mark.asyncio
    async def test_self_action_is_denied_without_lookups(self, identity):
        checker = InteractionChecker(identity)

        result = await checker.check(GUILD_ID, TARGET_ID, identity.members[TARGET_ID])

        assert isinstance(result, Denied)
        assert identity.calls == []

    @pytest.mark.asyncio
    async def test_gateway_error_becomes_failed(self, identity):
        identity.fail_on = "fetch_roles"
        checker = InteractionChecker(identity)

        result = await checker.check(GUILD_ID, MODERATOR_ID, identity.members[TARGET_ID])

        assert isinstance(result, Failed)
        assert isinstance(result.error, GatewayError)

    @pytest.mark.asyncio
    async def test_actor_not_a_member_fails(self, identity):
        del identity.members[MODERATOR_ID]
        checker = InteractionChecker(identity)

        result = await checker.check(GUILD_ID, MODERATOR_ID, identity.members[TARGET_ID])

        assert isinstance(result, Failed)
        assert isinstance(result.error, MissingDataError)

    @pytest.mark.asyncio
    async def test_bot_not_a_member_fails(self, identity):
        del identity.members[BOT_ID]
        checker = InteractionChecker(identity)

        result = await checker.check(GUILD_ID, OWNER_ID, identity.members[TARGET_ID])

        assert isinstance(result, Failed)

    @pytest.mark.asyncio
    async def test_moderator_cannot_act_on_peer(self, identity):
        identity.members[TARGET_ID] = member(4, 11)
        checker = InteractionChecker(identity)

        result = await checker.check(
            GUILD_ID, MODERATOR_ID, identity.members[TARGET_ID], action=ActionType.UNMUTE
        )

        assert result == Denied(get_message("user_cannot_unmute_target"))
