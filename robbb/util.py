"""General helpers: text formatting, dates, emoji parsing and environment access."""

from __future__ import annotations

import ipaddress
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TypeVar
from urllib.parse import urlsplit

T = TypeVar("T")

DISCORD_EPOCH_MS = 1420070400000
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FIND_EMOJI = re.compile(r"<a?:[0-9a-zA-Z_]{2,32}:[0-9]{18,}>")
_U64_LIMIT = 2**64

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY

# (threshold in seconds, unit in seconds or None for a fixed phrase, text)
_ROUGH_SCALE: tuple[tuple[int, int | None, str], ...] = (
    (547 * _DAY, _YEAR, "years"),
    (345 * _DAY, None, "a year"),
    (45 * _DAY, _MONTH, "months"),
    (29 * _DAY, None, "a month"),
    (10 * _DAY + 12 * _HOUR, _WEEK, "weeks"),
    (6 * _DAY + 12 * _HOUR, None, "a week"),
    (36 * _HOUR, _DAY, "days"),
    (22 * _HOUR, None, "a day"),
    (90 * _MINUTE, _HOUR, "hours"),
    (45 * _MINUTE, None, "an hour"),
    (90, _MINUTE, "minutes"),
    (45, None, "a minute"),
)


@dataclass(frozen=True)
class EmojiIdentifier:
    """A custom emoji as it appears in message text."""

    id: int
    name: str
    animated: bool = False


def ellipsis_text(text: str, max_len: int) -> str:
    """Cut ``text`` to at most ``max_len`` UTF-8 bytes, ending it with '...' when cut."""
    encoded = text.encode("utf-8")
    if len(encoded) + 3 <= max_len:
        return text
    if max_len < 3:
        raise ValueError("max_len must be at least 3 to fit an ellipsis")
    cutoff = max_len - 3
    while cutoff > 0 and (encoded[cutoff] & 0xC0) == 0x80:
        cutoff -= 1
    return encoded[:cutoff].decode("utf-8") + "..."


def thread_title_from_text(text: str) -> str:
    """Use the first non-blank line of ``text`` as a thread title."""
    for line in text.split("\n"):
        line = line.removesuffix("\r")
        if line.strip():
            return ellipsis_text(line, 96)
    raise ValueError("Text was empty")


def required_env_var(key: str, environ: Mapping[str, str] | None = None) -> str:
    """Return the environment variable ``key``, raising KeyError if it is not set."""
    env = os.environ if environ is None else environ
    try:
        return env[key]
    except KeyError:
        raise KeyError(f"Missing environment variable {key}") from None


def parse_required_env_var(
    key: str,
    parse: Callable[[str], T],
    environ: Mapping[str, str] | None = None,
) -> T:
    """Like :func:`required_env_var`, passing the value through ``parse``."""
    raw = required_env_var(key, environ)
    try:
        return parse(raw)
    except Exception as error:
        raise ValueError(f"Failed to parse env-var {key}") from error


def time_after_duration(duration: timedelta) -> datetime:
    """Return the moment ``duration`` from now, or now if that cannot be represented."""
    now = datetime.now(timezone.utc)
    try:
        return now + duration
    except OverflowError:
        return datetime.now(timezone.utc)


def _as_utc(date: datetime) -> datetime:
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def _timestamp(date: datetime) -> int:
    return (_as_utc(date) - _UNIX_EPOCH) // timedelta(seconds=1)


def _rough_text(seconds: int) -> str:
    n = abs(seconds)
    for threshold, unit, text in _ROUGH_SCALE:
        if n > threshold:
            if unit is None:
                return text
            return f"{max(n // unit, 2)} {text}"
    if n > 10:
        return f"{n} seconds"
    return "now"


def format_date_ago(date: datetime) -> str:
    """Format a date as a relative-time chat timestamp."""
    return f"<t:{_timestamp(date)}:R>"


def format_date_before_plaintext(a: datetime, b: datetime) -> str:
    """Describe the distance between ``a`` and ``b`` in rough plain English."""
    seconds = abs(_as_utc(a) - _as_utc(b)) // timedelta(seconds=1)
    text = _rough_text(seconds)
    return "now" if text == "now" else f"{text} ago"


def format_date(date: datetime) -> str:
    """Format a date as an absolute-time chat timestamp."""
    return f"<t:{_timestamp(date)}>"


def format_date_detailed(date: datetime) -> str:
    """Format a date showing both the concrete date and the relative time."""
    return f"{format_date(date)} ({format_date_ago(date)})"


def _truncated_rem(a: int, b: int) -> int:
    rem = abs(a) % b
    return -rem if a < 0 else rem


def format_count(num: int) -> str:
    """Format a number as an ordinal, like 1st, 2nd, 3rd."""
    last_digits = _truncated_rem(num, 100)
    if 11 <= last_digits <= 13:
        return f"{num}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(_truncated_rem(last_digits, 10), "th")
    return f"{num}{suffix}"


def parse_emoji(value: str) -> EmojiIdentifier | None:
    """Parse a single emoji mention such as ``<:name:id>``."""
    if not 6 <= len(value.encode("utf-8")) <= 56:
        return None
    if not (value.startswith("<:") or value.startswith("<a:")) or not value.endswith(">"):
        return None
    animated = value[1:3] == "a:"
    rest = value[3 if animated else 2 :]
    name, sep, tail = rest.partition(":")
    if not sep:
        return None
    id_text = tail.split(">", 1)[0]
    digits = id_text[1:] if id_text.startswith("+") else id_text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    emoji_id = int(digits)
    if emoji_id >= _U64_LIMIT:
        return None
    return EmojiIdentifier(id=emoji_id, name=name, animated=animated)


def find_emojis(value: str) -> list[EmojiIdentifier]:
    """Find all custom emojis in a string."""
    found = (parse_emoji(match.group(0)) for match in _FIND_EMOJI.finditer(value))
    return [emoji for emoji in found if emoji is not None]


def validate_url(value: str) -> bool:
    """Check that a string is a URL with a scheme and a domain name."""
    try:
        parts = urlsplit(value)
        host = parts.hostname
    except ValueError:
        return False
    if not parts.scheme or not host:
        return False
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return True
    return False


def pluralize(s: str) -> str:
    """Turn a trailing 'ys' into 'ies'."""
    if s.endswith("ys"):
        return s[:-2] + "ies"
    return s


def parse_backticked_string(s: str) -> str | None:
    """Remove surrounding backticks, or return None if the string is not backticked."""
    if len(s) >= 2 and s.startswith("`") and s.endswith("`"):
        return s[1:-1]
    return None


def is_image_file(s: str) -> bool:
    """Decide from the file extension whether a file is an image."""
    return s.rsplit(".", 1)[-1] in IMAGE_EXTENSIONS


def bot_version() -> str:
    """Return the bot version from the VERSION environment variable."""
    return os.environ.get("VERSION", "<no version>")


def time_to_discord_snowflake(time: datetime) -> int:
    """Convert a time into a snowflake usable to link to a point in chat."""
    millis = (_as_utc(time) - _UNIX_EPOCH) // timedelta(milliseconds=1)
    return (millis - DISCORD_EPOCH_MS) << 22


def generate_message_link(guild_id: int | None, channel_id: int, message_id: int) -> str:
    """Build a link to a message, inside a guild or a direct-message channel."""
    if guild_id is not None:
        return f"https://discord.com/channels/{guild_id}/{channel_id}/{message_id}"
    return f"https://discord.com/channels/@me/{channel_id}/{message_id}"


def split_once_at(s: str, c: str) -> tuple[str, str] | None:
    """Split at the first occurrence of ``c``, or return None if it does not occur."""
    index = s.find(c)
    if index < 0:
        return None
    return s[:index], s[index + len(c) :]


def split_at_word(s: str, split_at: str) -> tuple[str, str]:
    """Split a string into the words before and after ``split_at``.

    ``split_at_word("foo bar baz", "bar")`` gives ``("foo", "baz")``.
    """
    words = s.strip().split(" ")
    try:
        index = words.index(split_at)
    except ValueError:
        return s, ""
    return " ".join(words[:index]), " ".join(words[index + 1 :])