"""The guild emotes the bot decorates its messages with."""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field

_EMOJI_CDN = "https://cdn.discordapp.com/emojis"


@dataclass(frozen=True)
class Emoji:
    """A custom guild emoji."""

    id: int
    name: str
    animated: bool = False

    def url(self) -> str:
        """The image URL of the emoji."""
        ext = "gif" if self.animated else "png"
        return f"{_EMOJI_CDN}/{self.id}.{ext}"

    def __str__(self) -> str:
        prefix = "a" if self.animated else ""
        return f"<{prefix}:{self.name}:{self.id}>"


@dataclass(frozen=True)
class UpEmotes:
    """The emotes used in replies, plus the stares shown in embed footers."""

    pensibe: Emoji
    police: Emoji
    poggers: Emoji
    stares: tuple[Emoji, ...] = field(default_factory=tuple)

    def random_stare(self, rng: random.Random | None = None) -> Emoji | None:
        """A randomly chosen stare, or None if there are none."""
        if not self.stares:
            return None
        return (rng or random).choice(self.stares)


def _find(emojis: list[Emoji], name: str, label: str) -> Emoji:
    for emoji in emojis:
        if emoji.name == name:
            return emoji
    raise LookupError(f"no {label} emote found")


def load_up_emotes(emojis: Iterable[Emoji]) -> UpEmotes:
    """Pick the bot's emotes out of a guild's emojis; LookupError if one is missing."""
    all_emoji = list(emojis)
    return UpEmotes(
        pensibe=_find(all_emoji, "pensibe", "pensibe"),
        police=_find(all_emoji, "police", "police"),
        poggers=_find(all_emoji, "poggersphisch", "poggers"),
        stares=tuple(emoji for emoji in all_emoji if emoji.name.startswith("stare")),
    )