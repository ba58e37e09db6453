"""Tests for duration parsing and formatting helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from wardcord.datatypes.action_datatypes import INDEFINITE
from wardcord.util.format_utils import format_deadline, format_duration, parse_mute_duration, parse_timespan


@pytest.mark.parametrize(
    "text,expected",
    [
        ("30s", timedelta(seconds=30)),
        ("10m", timedelta(minutes=10)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1H 30M", timedelta(hours=1, minutes=30)),
        ("2d", timedelta(days=2)),
        ("1w", timedelta(weeks=1)),
        ("1d12h", timedelta(days=1, hours=12)),
    ],
)
def test_parse_timespan(text, expected):
    assert parse_timespan(text) == expected


@pytest.mark.parametrize("text", ["", "soon", "10", "m10", "1h foo", "-5m", "1.5h"])
def test_parse_timespan_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_timespan(text)


@pytest.mark.parametrize("text", ["permanent", "PERM", "forever", "inf", "-1", " indefinite "])
def test_parse_mute_duration_indefinite_words(text):
    assert parse_mute_duration(text) is INDEFINITE


def test_parse_mute_duration_regular():
    assert parse_mute_duration("15m") == timedelta(minutes=15)


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0s"), (-5, "0s"), (59, "59s"), (3600, "1h"), (5400, "1h 30m"), (90061, "1d 1h 1m 1s"), (604800, "1w")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_deadline_uses_timestamp_markup():
    deadline = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert format_deadline(deadline) == f"<t:{int(deadline.timestamp())}:f>"


@pytest.mark.parametrize("deadline", [None, INDEFINITE])
def test_format_deadline_rejects_open_ended(deadline):
    with pytest.raises(ValueError):
        format_deadline(deadline)


@pytest.mark.parametrize("text", ["0s", "0m", "0h 0m"])
def test_parse_mute_duration_rejects_zero(text):
    with pytest.raises(ValueError):
        parse_mute_duration(text)
