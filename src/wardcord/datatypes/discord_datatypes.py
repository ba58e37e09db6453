"""
Type-safe identifiers and plain data records for guild, role and member data.

The identifier wrappers keep guild, user, role and channel snowflakes from
being mixed up; the records are detached copies of what the platform returns,
so decision code can run over them without holding any client objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Union

import discord


SNOWFLAKE_MAX = (1 << 64) - 1


class Snowflake:
    """
    Base class for the 64-bit platform identifiers.

    Snowflakes travel as strings in JSON payloads and as ints in API calls;
    both forms are accepted. Identifiers of different kinds never compare
    equal, even with the same numeric value.

    Example:
        >>> uid = UserID.from_int(123456789012345678)
        >>> uid.to_int()
        123456789012345678
        >>> UserID("123456789012345678") == 123456789012345678
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        if isinstance(value, Snowflake):
            number = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool")
        elif isinstance(value, int):
            number = value
        elif isinstance(value, str):
            number = int(value.strip())
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

        if not 0 <= number <= SNOWFLAKE_MAX:
            raise ValueError(f"{number} is outside the snowflake range")
        self._value = number

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    def to_int(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return str(self._value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._value)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(other) is type(self) and other._value == self._value
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return self._value == other
        if isinstance(other, str):
            return str(self._value) == other.strip()
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))


class GuildID(Snowflake):
    """Snowflake of a guild."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild: discord.Guild) -> "GuildID":
        return cls(guild.id)


class UserID(Snowflake):
    """Snowflake of a user (members share their user's id)."""

    __slots__ = ()

    @classmethod
    def from_user(cls, user: Union[discord.Member, discord.User]) -> "UserID":
        return cls(user.id)


class RoleID(Snowflake):
    """Snowflake of a role."""

    __slots__ = ()


class ChannelID(Snowflake):
    """Snowflake of a channel."""

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel: discord.abc.Snowflake) -> "ChannelID":
        return cls(channel.id)


@dataclass(frozen=True, slots=True)
class Role:
    """A role and its position; higher positions are more senior."""

    id: RoleID
    position: int

    @classmethod
    def from_discord(cls, role: discord.Role) -> "Role":
        return cls(id=RoleID(role.id), position=role.position)


@dataclass(frozen=True, slots=True)
class Guild:
    id: GuildID
    owner_id: UserID

    @classmethod
    def from_discord(cls, guild: discord.Guild) -> "Guild":
        return cls(id=GuildID(guild.id), owner_id=UserID(guild.owner_id))


@dataclass(frozen=True, slots=True)
class GuildMember:
    """
    Membership of a user in a guild.

    ``user_id`` is ``None`` when the platform returned a partial member
    payload; such a member cannot take part in an interaction check.
    ``communication_disabled_until`` mirrors the platform's mute deadline.
    """

    user_id: Optional[UserID]
    role_ids: FrozenSet[RoleID] = field(default_factory=frozenset)
    communication_disabled_until: Optional[datetime] = None

    @classmethod
    def from_discord(cls, member: discord.Member) -> "GuildMember":
        # The @everyone role shares the guild id and sits at position 0.
        role_ids = frozenset(RoleID(role.id) for role in member.roles if role.id != member.guild.id)
        return cls(
            user_id=UserID(member.id),
            role_ids=role_ids,
            communication_disabled_until=member.communication_disabled_until,
        )


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Display identity of a user, used only to render responses."""

    id: UserID
    tag: str
    avatar_url: Optional[str] = None
    mention: str = ""

    @classmethod
    def from_discord(cls, user: Union[discord.User, discord.Member, discord.ClientUser]) -> "UserProfile":
        avatar = getattr(user, "display_avatar", None)
        return cls(
            id=UserID(user.id),
            tag=str(user),
            avatar_url=avatar.url if avatar is not None else None,
            mention=user.mention,
        )
