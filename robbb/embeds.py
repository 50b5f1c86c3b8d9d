"""Embeds: the rich message blocks the bot replies with."""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from robbb.emotes import Emoji, UpEmotes
from robbb.models import User

SUCCESS_COLOR = 0xB8BB26
ERROR_COLOR = 0xFB4934
FOOTER_BLANK = "\u200b"


@dataclass
class Embed:
    """An embed under construction."""

    title: str | None = None
    description: str | None = None
    color: int | None = None
    timestamp: datetime | None = None
    footer_text: str | None = None
    footer_icon_url: str | None = None
    author_name: str | None = None
    author_icon_url: str | None = None
    author_url: str | None = None
    fields: list[tuple[str, str, bool]] = field(default_factory=list)

    def copy(self) -> Embed:
        """An independent copy of this embed."""
        return copy.deepcopy(self)

    def add_field(self, name: str, value: str, inline: bool = False) -> Embed:
        """Append a field."""
        self.fields.append((name, value, inline))
        return self

    def color_opt(self, color: int | None) -> Embed:
        """Set the color only when one is given."""
        if color is not None:
            self.color = color
        return self

    def author_user(self, user: User) -> Embed:
        """Show ``user`` as the author, linking to their profile."""
        self.author_name = user.tag()
        self.author_icon_url = user.face()
        self.author_url = f"discord://-/users/{user.id}"
        return self


def make_create_embed(
    up_emotes: UpEmotes | None = None,
    build: Callable[[Embed], object] | None = None,
) -> Embed:
    """A timestamped embed with a blank footer carrying a random stare, then ``build``."""
    stare = up_emotes.random_stare() if up_emotes is not None else None
    embed = Embed(
        timestamp=datetime.now(timezone.utc),
        footer_text=FOOTER_BLANK,
        footer_icon_url=stare.url() if stare is not None else None,
    )
    if build is not None:
        build(embed)
    return embed


def _message_embed(text: str, emote: Emoji | None, color: int) -> Embed:
    suffix = f" {emote}" if emote is not None else ""
    return Embed(description=f"{text}{suffix}", color=color)


def make_success_embed(text: str, up_emotes: UpEmotes | None = None) -> Embed:
    """A green embed reporting success."""
    return _message_embed(text, up_emotes.poggers if up_emotes else None, SUCCESS_COLOR)


def make_success_mod_action_embed(text: str, up_emotes: UpEmotes | None = None) -> Embed:
    """A green embed reporting a completed moderator action."""
    return _message_embed(text, up_emotes.police if up_emotes else None, SUCCESS_COLOR)


def make_error_embed(text: str, up_emotes: UpEmotes | None = None) -> Embed:
    """A red embed reporting an error."""
    return _message_embed(text, up_emotes.pensibe if up_emotes else None, ERROR_COLOR)