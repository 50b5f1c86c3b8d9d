"""Embeds split over several pages, flipped through with two buttons."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from itertools import islice
from typing import TypeVar

from robbb.embeds import Embed
from robbb.util import ellipsis_text

T = TypeVar("T")

PAGINATION_LEFT = "LEFT"
PAGINATION_RIGHT = "RIGHT"
MAX_EMBED_FIELDS = 12
MAX_FIELD_VALUE_LEN = 500


@dataclass(frozen=True)
class Button:
    """A clickable button."""

    label: str
    custom_id: str
    disabled: bool = False


def _chunks(items: Iterable[T], size: int) -> Iterator[list[T]]:
    iterator = iter(items)
    while chunk := list(islice(iterator, size)):
        yield chunk


@dataclass
class PaginatedEmbed:
    """Pages of embeds, plus the embed shown when there are no pages."""

    pages: list[Embed] = field(default_factory=list)
    base_embed: Embed = field(default_factory=Embed)

    @classmethod
    def create(cls, embeds: Iterable[Embed], base_embed: Embed) -> PaginatedEmbed:
        """Paginate ready-made embeds."""
        return cls(list(embeds), base_embed)

    @classmethod
    def create_from_fields(
        cls, title: str, fields: Iterable[tuple[str, str]], base_embed: Embed
    ) -> PaginatedEmbed:
        """Spread (name, value) fields over pages built from ``base_embed``."""
        chunks = list(_chunks(fields, MAX_EMBED_FIELDS))
        page_cnt = len(chunks)
        pages = []
        for page_idx, chunk in enumerate(chunks):
            page = base_embed.copy()
            page.title = title if page_cnt < 2 else f"{title} ({page_idx + 1}/{page_cnt})"
            page.fields.extend(
                (name, ellipsis_text(value, MAX_FIELD_VALUE_LEN), False) for name, value in chunk
            )
            pages.append(page)
        return cls(pages, base_embed)

    def initial_page(self) -> Embed:
        """The embed to show first: the first page, or the base embed if there are none."""
        return self.pages[0] if self.pages else self.base_embed


def next_page_index(current: int, direction: str, page_cnt: int) -> int:
    """The page to show after a button press, staying within the pages."""
    if direction == PAGINATION_LEFT and current > 0:
        return current - 1
    if direction == PAGINATION_RIGHT and current < page_cnt - 1:
        return current + 1
    return current


def make_paginate_components(page_idx: int, page_cnt: int) -> list[list[Button]]:
    """One row with a back and a forward button, disabled at the ends."""
    if page_cnt < 1:
        raise ValueError("page_cnt must be at least 1")
    return [
        [
            Button("←", PAGINATION_LEFT, disabled=page_idx == 0),
            Button("→", PAGINATION_RIGHT, disabled=page_idx >= page_cnt - 1),
        ]
    ]