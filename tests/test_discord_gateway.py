"""Tests for the py-cord gateway adapter using mocked client objects."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from wardcord.datatypes.action_datatypes import INDEFINITE
from wardcord.datatypes.discord_datatypes import ChannelID, GuildID, RoleID, UserID
from wardcord.datatypes.errors import GatewayError
from wardcord.gateway.discord_gateway import DiscordGateway


def http_error(cls=discord.HTTPException, status: int = 500):
    return cls(MagicMock(status=status, reason="error"), "error")


def make_member(user_id: int = 4, role_ids=(10,)):
    guild = SimpleNamespace(id=100)
    roles = [SimpleNamespace(id=100)] + [SimpleNamespace(id=role_id) for role_id in role_ids]
    return SimpleNamespace(
        id=user_id, guild=guild, roles=roles, communication_disabled_until=None, timeout=AsyncMock()
    )


def make_guild(member=None):
    guild = MagicMock()
    guild.id = 100
    guild.owner_id = 1
    guild.roles = [SimpleNamespace(id=100, position=0), SimpleNamespace(id=10, position=3)]
    guild.get_member.return_value = member
    guild.fetch_member = AsyncMock(return_value=member)
    return guild


def make_bot(guild=None):
    bot = MagicMock()
    bot.get_guild.return_value = guild
    bot.fetch_guild = AsyncMock(return_value=guild)
    return bot


class TestIdentity:
    @pytest.mark.asyncio
    async def test_current_user(self):
        bot = make_bot()
        bot.user = SimpleNamespace(id=2, mention="<@2>", display_avatar=SimpleNamespace(url="https://cdn.example/2.png"))

        profile = await DiscordGateway(bot).fetch_current_user()

        assert profile.id == UserID(2)
        assert profile.avatar_url == "https://cdn.example/2.png"

    @pytest.mark.asyncio
    async def test_current_user_before_login(self):
        bot = make_bot()
        bot.user = None

        with pytest.raises(GatewayError):
            await DiscordGateway(bot).fetch_current_user()

    @pytest.mark.asyncio
    async def test_user_falls_back_to_fetch(self):
        bot = make_bot()
        bot.get_user.return_value = None
        bot.fetch_user = AsyncMock(return_value=SimpleNamespace(id=4, mention="<@4>", display_avatar=None))

        profile = await DiscordGateway(bot).fetch_user(UserID(4))

        bot.fetch_user.assert_awaited_once_with(4)
        assert profile.id == UserID(4)
        assert profile.avatar_url is None

    @pytest.mark.asyncio
    async def test_user_fetch_failure(self):
        bot = make_bot()
        bot.get_user.return_value = None
        bot.fetch_user = AsyncMock(side_effect=http_error(discord.NotFound, 404))

        with pytest.raises(GatewayError):
            await DiscordGateway(bot).fetch_user(UserID(4))

    @pytest.mark.asyncio
    async def test_guild_and_roles_from_cache(self):
        bot = make_bot(make_guild())
        gateway = DiscordGateway(bot)

        guild = await gateway.fetch_guild(GuildID(100))
        roles = await gateway.fetch_roles(GuildID(100))

        assert guild.owner_id == UserID(1)
        assert [(role.id, role.position) for role in roles] == [(RoleID(100), 0), (RoleID(10), 3)]
        bot.fetch_guild.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guild_fetch_failure(self):
        bot = make_bot()
        bot.fetch_guild.side_effect = http_error(discord.Forbidden, 403)

        with pytest.raises(GatewayError):
            await DiscordGateway(bot).fetch_guild(GuildID(100))

    @pytest.mark.asyncio
    async def test_member_drops_everyone_role(self):
        bot = make_bot(make_guild(make_member(role_ids=(10, 11))))

        member = await DiscordGateway(bot).fetch_member(GuildID(100), UserID(4))

        assert member.user_id == UserID(4)
        assert member.role_ids == frozenset({RoleID(10), RoleID(11)})

    @pytest.mark.asyncio
    async def test_missing_member_is_none(self):
        guild = make_guild()
        guild.fetch_member.side_effect = http_error(discord.NotFound, 404)

        assert await DiscordGateway(make_bot(guild)).fetch_member(GuildID(100), UserID(4)) is None

    @pytest.mark.asyncio
    async def test_member_transport_failure(self):
        guild = make_guild()
        guild.fetch_member.side_effect = http_error()

        with pytest.raises(GatewayError):
            await DiscordGateway(make_bot(guild)).fetch_member(GuildID(100), UserID(4))


class TestMutation:
    @pytest.mark.asyncio
    async def test_mute_until_deadline(self):
        member = make_member()
        deadline = datetime(2030, 1, 1, tzinfo=timezone.utc)

        await DiscordGateway(make_bot(make_guild(member))).set_communication_disabled_until(
            GuildID(100), UserID(4), deadline, "spam"
        )

        member.timeout.assert_awaited_once_with(deadline, reason="spam")

    @pytest.mark.asyncio
    async def test_unmute(self):
        member = make_member()

        await DiscordGateway(make_bot(make_guild(member))).set_communication_disabled_until(
            GuildID(100), UserID(4), None, "done"
        )

        member.timeout.assert_awaited_once_with(None, reason="done")

    @pytest.mark.asyncio
    async def test_indefinite_is_clamped(self):
        member = make_member()
        gateway = DiscordGateway(make_bot(make_guild(member)), max_timeout=timedelta(days=7))

        before = discord.utils.utcnow()
        await gateway.set_communication_disabled_until(GuildID(100), UserID(4), INDEFINITE, "forever")

        until = member.timeout.await_args.args[0]
        assert timedelta(days=7) <= until - before < timedelta(days=7, minutes=1)

    @pytest.mark.asyncio
    async def test_member_gone(self):
        guild = make_guild()
        guild.fetch_member.side_effect = http_error(discord.NotFound, 404)

        with pytest.raises(GatewayError):
            await DiscordGateway(make_bot(guild)).set_communication_disabled_until(GuildID(100), UserID(4), None, "x")

    @pytest.mark.asyncio
    async def test_timeout_rejected(self):
        member = make_member()
        member.timeout.side_effect = http_error(discord.Forbidden, 403)

        with pytest.raises(GatewayError) as info:
            await DiscordGateway(make_bot(make_guild(member))).set_communication_disabled_until(
                GuildID(100), UserID(4), None, "x"
            )
        assert isinstance(info.value.__cause__, discord.Forbidden)


class TestDispatch:
    @pytest.mark.asyncio
    async def test_send_to_cached_channel(self):
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()
        bot = make_bot()
        bot.get_channel.return_value = channel
        embed = discord.Embed(description="audit")

        await DiscordGateway(bot).send_embed(ChannelID(600), embed)

        channel.send.assert_awaited_once_with(embed=embed)

    @pytest.mark.asyncio
    async def test_send_fetches_unknown_channel(self):
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()
        bot = make_bot()
        bot.get_channel.return_value = None
        bot.fetch_channel = AsyncMock(return_value=channel)

        await DiscordGateway(bot).send_embed(ChannelID(600), discord.Embed())

        bot.fetch_channel.assert_awaited_once_with(600)
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_messageable_channel(self):
        bot = make_bot()
        bot.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

        with pytest.raises(GatewayError):
            await DiscordGateway(bot).send_embed(ChannelID(600), discord.Embed())

    @pytest.mark.asyncio
    async def test_send_failure(self):
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock(side_effect=http_error(discord.Forbidden, 403))
        bot = make_bot()
        bot.get_channel.return_value = channel

        with pytest.raises(GatewayError):
            await DiscordGateway(bot).send_embed(ChannelID(600), discord.Embed())
