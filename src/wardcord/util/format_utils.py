import re
from datetime import timedelta

import discord

from wardcord.datatypes.action_datatypes import INDEFINITE, MuteDeadline, MuteDuration

# Words accepted wherever a duration may be given to mean "no expiry"
INDEFINITE_WORDS = frozenset({"permanent", "perm", "indefinite", "forever", "inf", "-1"})

_UNIT_SECONDS = {
    "w": 7 * 24 * 3600,
    "d": 24 * 3600,
    "h": 3600,
    "m": 60,
    "s": 1,
}
_TIMESPAN_PART = re.compile(r"(\d+)\s*([wdhms])", re.IGNORECASE)
_TIMESPAN_FULL = re.compile(r"^(?:\s*\d+\s*[wdhms]\s*)+$", re.IGNORECASE)


def parse_timespan(text: str) -> timedelta:
    """
    Parse a compact duration such as ``30s``, ``10m``, ``1h30m`` or ``2d``.

    Raises:
        ValueError: If ``text`` is not made only of number+unit pairs.
    """
    if not _TIMESPAN_FULL.match(text or ""):
        raise ValueError(f"Not a duration: {text!r}")
    seconds = sum(int(amount) * _UNIT_SECONDS[unit.lower()] for amount, unit in _TIMESPAN_PART.findall(text))
    return timedelta(seconds=seconds)


def parse_mute_duration(text: str) -> MuteDuration:
    """
    Like :func:`parse_timespan`, but also accepts the words for "no expiry".

    Raises:
        ValueError: If ``text`` is not a duration or the duration is zero.
    """
    if text.strip().lower() in INDEFINITE_WORDS:
        return INDEFINITE
    duration = parse_timespan(text)
    if duration <= timedelta(0):
        raise ValueError(f"A mute must last longer than zero: {text!r}")
    return duration


def format_duration(seconds: int) -> str:
    """
    Convert a duration in seconds to a compact human-readable string.

    Example: ``5400`` -> ``"1h 30m"``. Zero renders as ``"0s"``.
    """
    if seconds <= 0:
        return "0s"
    parts = []
    for unit, size in _UNIT_SECONDS.items():
        amount, seconds = divmod(seconds, size)
        if amount:
            parts.append(f"{amount}{unit}")
    return " ".join(parts)


def format_deadline(deadline: MuteDeadline) -> str:
    """Render a mute deadline as a platform timestamp markup."""
    if deadline is None or deadline is INDEFINITE:
        raise ValueError("Only concrete deadlines can be rendered as timestamps")
    return discord.utils.format_dt(deadline, style="f")
