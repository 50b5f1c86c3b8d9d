"""Plain data models for chat users, attachments and messages."""

from __future__ import annotations

from dataclasses import dataclass, field

from robbb.util import generate_message_link, is_image_file

_CDN = "https://cdn.discordapp.com"


@dataclass(frozen=True)
class User:
    """A chat user."""

    id: int
    name: str
    discriminator: int = 0
    avatar: str | None = None

    def tag(self) -> str:
        """The user as ``name#discriminator``."""
        return f"{self.name}#{self.discriminator:04d}"

    def mention(self) -> str:
        """A mention of the user."""
        return f"<@{self.id}>"

    def _avatar_url(self) -> str | None:
        if self.avatar is None:
            return None
        ext = "gif" if self.avatar.startswith("a_") else "webp"
        return f"{_CDN}/avatars/{self.id}/{self.avatar}.{ext}?size=1024"

    def _default_avatar_url(self) -> str:
        return f"{_CDN}/embed/avatars/{self.discriminator % 5}.png"

    def face(self) -> str:
        """The user's avatar, or the default avatar if none is set."""
        return self._avatar_url() or self._default_avatar_url()

    def name_with_disc_and_id(self) -> str:
        """The user as ``name#discriminator (user-id)``."""
        return f"{self.tag()} ({self.id})"

    def mention_and_tag(self) -> str:
        """The user as ``@mention (name#discriminator)``."""
        return f"{self.mention()} ({self.tag()})"


@dataclass(frozen=True)
class Attachment:
    """A file attached to a message."""

    id: int
    filename: str
    url: str
    width: int | None = None
    height: int | None = None

    def dimensions(self) -> tuple[int, int] | None:
        """Width and height, present only for images and videos."""
        if self.width is None or self.height is None:
            return None
        return self.width, self.height


@dataclass
class Message:
    """A chat message with the parts the bot inspects."""

    id: int
    channel_id: int
    guild_id: int | None = None
    embed_image_urls: list[str | None] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)

    def link(self) -> str:
        """A link to this message."""
        return generate_message_link(self.guild_id, self.channel_id, self.id)

    def find_image_urls(self) -> list[str]:
        """URLs of embedded images followed by image attachments."""
        embedded = [url for url in self.embed_image_urls if url is not None]
        attached = [
            attachment.url
            for attachment in self.attachments
            if attachment.dimensions() is not None and is_image_file(attachment.filename)
        ]
        return embedded + attached

    def to_context_link(self) -> str:
        """A markdown link labelled '(context)' pointing at this message."""
        return f"[(context)]({self.link()})"