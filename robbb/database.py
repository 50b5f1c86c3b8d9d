"""The complete database handle, combining every group of queries."""

from __future__ import annotations

from robbb.blocklist import BlocklistMixin
from robbb.core import DbBase
from robbb.emoji_logging import EmojiLoggingMixin
from robbb.fetch import FetchMixin
from robbb.highlights import HighlightsMixin
from robbb.mod_action import ModActionMixin
from robbb.mute import MuteMixin
from robbb.tag import TagMixin


class Db(
    BlocklistMixin,
    TagMixin,
    FetchMixin,
    EmojiLoggingMixin,
    HighlightsMixin,
    ModActionMixin,
    MuteMixin,
    DbBase,
):
    """The bot's database: blocklist, tags, fetches, emoji stats, highlights and moderation."""