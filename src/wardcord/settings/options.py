"""
Typed option descriptors over a guild's settings mapping.

A guild's settings are a plain JSON-like ``dict`` (option name -> stored
value). Each :class:`Option` knows how to turn raw user input into a typed
value, how to store it in that mapping, how to read it back and how to show
it. Options hold nothing but their name and default, so one instance serves
every guild.

All option kinds share the same contract:

- ``get(settings)`` returns the stored value, or the default when the key is
  missing or its stored value no longer validates.
- ``set(settings, raw)`` parses ``raw`` and stores it. It never raises for
  bad input; it returns a :class:`SettingUpdate` and leaves ``settings``
  untouched on failure.
- ``display(settings)`` renders the current value for a human.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Generic, Iterator, MutableMapping, Optional, Tuple, Type, TypeVar

from wardcord.datatypes.discord_datatypes import ChannelID, Snowflake
from wardcord.ui.messages import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, get_message
from wardcord.util.format_utils import format_duration, parse_timespan
from wardcord.util.logger import get_logger

logger = get_logger("options")

T = TypeVar("T")
S = TypeVar("S", bound=Snowflake)

Settings = MutableMapping[str, Any]

# Key of the option that picks the language every display is rendered in
LANGUAGE_KEY = "language"


def settings_language(settings: Settings) -> str:
    language = settings.get(LANGUAGE_KEY, DEFAULT_LANGUAGE)
    return language if language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


@dataclass(frozen=True, slots=True)
class SettingUpdate:
    """Result of :meth:`Option.set`; ``error`` is a displayable message on failure."""

    option_name: str
    success: bool
    error: Optional[str] = None


class Option(Generic[T]):
    """Base descriptor. Subclasses implement ``parse`` and, where the stored
    form differs from the typed value, ``serialize``/``deserialize``."""

    def __init__(self, name: str, default: T) -> None:
        self.name = name
        self.default = default

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, default={self.default!r})"

    # -- conversion hooks --------------------------------------------------
    def parse(self, raw: str) -> T:
        """Turn user input into a value. Raises ValueError when ``raw`` is invalid."""
        raise NotImplementedError

    def serialize(self, value: T) -> Any:
        return value

    def deserialize(self, stored: Any) -> T:
        return stored

    def render(self, value: T, language: str) -> str:
        return str(value)

    # -- public contract ---------------------------------------------------
    def get(self, settings: Settings) -> T:
        if self.name not in settings:
            return self.default
        stored = settings[self.name]
        try:
            return self.deserialize(stored)
        except (TypeError, ValueError):
            logger.warning("[OPTIONS] Stored value %r for %s is invalid; using default", stored, self.name)
            return self.default

    def set(self, settings: Settings, raw: str) -> SettingUpdate:
        try:
            value = self.parse(raw)
        except ValueError as exc:
            logger.debug("[OPTIONS] Rejected %r for %s: %s", raw, self.name, exc)
            return SettingUpdate(
                self.name,
                success=False,
                error=get_message("invalid_setting_value", settings_language(settings)),
            )

        settings[self.name] = self.serialize(value)
        return SettingUpdate(self.name, success=True)

    def display(self, settings: Settings) -> str:
        return self.render(self.get(settings), settings_language(settings))


class BoolOption(Option[bool]):
    TRUTHY = frozenset({"true", "1", "y", "yes", "д", "да"})
    # "нъет" is a common joke spelling of "нет" and is accepted on purpose
    FALSY = frozenset({"false", "0", "n", "no", "н", "не", "нет", "нъет"})

    def parse(self, raw: str) -> bool:
        token = raw.strip().lower()
        if token in self.TRUTHY:
            return True
        if token in self.FALSY:
            return False
        raise ValueError(f"{raw!r} is not a yes/no value")

    def deserialize(self, stored: Any) -> bool:
        if not isinstance(stored, bool):
            raise TypeError(f"expected bool, got {type(stored).__name__}")
        return stored

    def render(self, value: bool, language: str) -> str:
        return get_message("yes" if value else "no", language)


class StringOption(Option[str]):
    MAX_LENGTH = 1024

    def parse(self, raw: str) -> str:
        value = raw.strip()
        if not value:
            raise ValueError("empty string")
        if len(value) > self.MAX_LENGTH:
            raise ValueError(f"longer than {self.MAX_LENGTH} characters")
        return value

    def deserialize(self, stored: Any) -> str:
        if not isinstance(stored, str):
            raise TypeError(f"expected str, got {type(stored).__name__}")
        return stored

    def render(self, value: str, language: str) -> str:
        return f"`{value}`"


class SnowflakeOption(Option[S]):
    """An optional channel/role/user id. The id 0 means "not set"."""

    CLEAR_WORDS = frozenset({"0", "none", "off", "reset"})
    _MENTION = re.compile(r"^<(?:#|@&|@!?)(\d+)>$")

    def __init__(self, name: str, id_type: Type[S] = ChannelID, mention_format: str = "<#{id}>") -> None:
        super().__init__(name, id_type(0))
        self.id_type = id_type
        self.mention_format = mention_format

    def parse(self, raw: str) -> S:
        token = raw.strip()
        if token.lower() in self.CLEAR_WORDS:
            return self.id_type(0)
        match = self._MENTION.match(token)
        digits = match.group(1) if match else token
        if not digits.isdigit():
            raise ValueError(f"{raw!r} is not an id or mention")
        return self.id_type(int(digits))

    def serialize(self, value: S) -> int:
        return value.to_int()

    def deserialize(self, stored: Any) -> S:
        if isinstance(stored, bool) or not isinstance(stored, (int, str)):
            raise TypeError(f"expected an id, got {type(stored).__name__}")
        return self.id_type(stored)

    def render(self, value: S, language: str) -> str:
        if value.to_int() == 0:
            return get_message("channel_not_specified", language)
        return self.mention_format.format(id=value.to_int())


class EnumOption(Option[str]):
    def __init__(self, name: str, default: str, choices: Tuple[str, ...]) -> None:
        if default not in choices:
            raise ValueError(f"default {default!r} is not one of {choices}")
        super().__init__(name, default)
        self.choices = choices

    def parse(self, raw: str) -> str:
        token = raw.strip().lower()
        if token not in self.choices:
            raise ValueError(f"{raw!r} is not one of {', '.join(self.choices)}")
        return token

    def deserialize(self, stored: Any) -> str:
        if stored not in self.choices:
            raise ValueError(f"{stored!r} is not one of {self.choices}")
        return stored

    def render(self, value: str, language: str) -> str:
        return f"`{value}`"


class TimeSpanOption(Option[timedelta]):
    """A positive duration, stored as whole seconds."""

    def parse(self, raw: str) -> timedelta:
        value = parse_timespan(raw)
        if value <= timedelta(0):
            raise ValueError("duration must be positive")
        return value

    def serialize(self, value: timedelta) -> int:
        return int(value.total_seconds())

    def deserialize(self, stored: Any) -> timedelta:
        if isinstance(stored, bool) or not isinstance(stored, int) or stored <= 0:
            raise ValueError(f"{stored!r} is not a positive number of seconds")
        return timedelta(seconds=stored)

    def render(self, value: timedelta, language: str) -> str:
        return format_duration(int(value.total_seconds()))


class OptionRegistry:
    """Read-only catalog of option descriptors, looked up by name.

    Unknown names raise KeyError: callers are expected to validate names
    coming from users with ``in`` first.
    """

    def __init__(self, *options: Option) -> None:
        self._options: Dict[str, Option] = {}
        for option in options:
            if option.name in self._options:
                raise ValueError(f"Duplicate option name {option.name!r}")
            self._options[option.name] = option

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options.values())

    def __len__(self) -> int:
        return len(self._options)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._options)

    def option(self, name: str) -> Option:
        return self._options[name]

    def get(self, settings: Settings, name: str) -> Any:
        return self.option(name).get(settings)

    def set(self, settings: Settings, name: str, raw: str) -> SettingUpdate:
        return self.option(name).set(settings, raw)

    def display(self, settings: Settings, name: str) -> str:
        return self.option(name).display(settings)
