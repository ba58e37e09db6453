"""
Pytest configuration and fixtures for Wardcord tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from wardcord.datatypes.discord_datatypes import (  # noqa: E402
    ChannelID,
    Guild,
    GuildID,
    GuildMember,
    Role,
    RoleID,
    UserID,
    UserProfile,
)
from wardcord.datatypes.errors import GatewayError  # noqa: E402

GUILD_ID = GuildID(100)
OWNER_ID = UserID(1)
BOT_ID = UserID(2)
MODERATOR_ID = UserID(3)
TARGET_ID = UserID(4)
ORIGIN_CHANNEL = ChannelID(500)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeIdentity:
    """In-memory IdentitySource; set ``fail_on`` to make one method raise GatewayError."""

    def __init__(self) -> None:
        self.guild = Guild(GUILD_ID, OWNER_ID)
        self.roles: List[Role] = [
            Role(RoleID(10), 1),
            Role(RoleID(11), 5),
            Role(RoleID(12), 10),
        ]
        self.users: Dict[UserID, UserProfile] = {
            user_id: UserProfile(user_id, f"user{int(user_id)}", f"https://cdn.example/{int(user_id)}.png")
            for user_id in (OWNER_ID, BOT_ID, MODERATOR_ID, TARGET_ID)
        }
        self.members: Dict[UserID, GuildMember] = {
            OWNER_ID: GuildMember(OWNER_ID),
            BOT_ID: GuildMember(BOT_ID, frozenset({RoleID(12)})),
            MODERATOR_ID: GuildMember(MODERATOR_ID, frozenset({RoleID(11)})),
            TARGET_ID: GuildMember(TARGET_ID, frozenset({RoleID(10)})),
        }
        self.fail_on: Optional[str] = None
        self.calls: List[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise GatewayError(f"{name} failed")

    async def fetch_current_user(self) -> UserProfile:
        self._record("fetch_current_user")
        return self.users[BOT_ID]

    async def fetch_user(self, user_id: UserID) -> UserProfile:
        self._record("fetch_user")
        if user_id not in self.users:
            raise GatewayError(f"Unknown user {user_id}")
        return self.users[user_id]

    async def fetch_guild(self, guild_id: GuildID) -> Guild:
        self._record("fetch_guild")
        return self.guild

    async def fetch_roles(self, guild_id: GuildID) -> List[Role]:
        self._record("fetch_roles")
        return list(self.roles)

    async def fetch_member(self, guild_id: GuildID, user_id: UserID) -> Optional[GuildMember]:
        self._record("fetch_member")
        return self.members.get(user_id)


class FakeMutator:
    """Remembers the deadline each member was given."""

    def __init__(self) -> None:
        self.deadlines: Dict[UserID, object] = {}
        self.reasons: List[str] = []
        self.error: Optional[Exception] = None

    async def set_communication_disabled_until(self, guild_id, user_id, until, reason) -> None:
        if self.error is not None:
            raise self.error
        self.deadlines[user_id] = until
        self.reasons.append(reason)


class FakeDispatcher:
    def __init__(self) -> None:
        self.sent: List[SimpleNamespace] = []
        self.error: Optional[Exception] = None

    async def send_embed(self, channel_id: ChannelID, embed) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(SimpleNamespace(channel_id=channel_id, embed=embed))


class Responses:
    """Collects embeds a pipeline answers with."""

    def __init__(self) -> None:
        self.embeds: list = []

    async def __call__(self, embed) -> None:
        self.embeds.append(embed)


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def mutator() -> FakeMutator:
    return FakeMutator()


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def responses() -> Responses:
    return Responses()
