"""Bot configuration read from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from robbb.util import parse_required_env_var, required_env_var

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U64_LIMIT = 2**64


def _parse_u64(text: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value >= _U64_LIMIT:
        raise ValueError(f"number too large: {text!r}")
    return value


@dataclass
class Config:
    """Ids of the guild, roles and channels the bot works with, and its settings."""

    discord_token: str
    guild: int
    role_mod: int
    role_helper: int
    role_mute: int
    roles_color: list[int]
    category_mod_private: int
    channel_showcase: int
    channel_feedback: int
    channel_modlog: int
    channel_mod_bot_stuff: int
    channel_auto_mod: int
    channel_bot_messages: int
    channel_bot_traffic: int
    channel_tech_support: int
    channel_mod_polls: int
    channel_attachment_dump: int | None
    attachment_cache_path: Path
    attachment_cache_max_size: int
    time_started: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Read the configuration; KeyError for a missing and ValueError for a bad value."""
        env = os.environ if environ is None else environ

        def ident(key: str) -> int:
            return parse_required_env_var(key, _parse_u64, env)

        discord_token = required_env_var("TOKEN", env)
        guild = ident("GUILD")
        role_mod = ident("ROLE_MOD")
        role_helper = ident("ROLE_HELPER")
        role_mute = ident("ROLE_MUTE")
        roles_color = [
            _parse_u64(part.strip()) for part in required_env_var("ROLES_COLOR", env).split(",")
        ]
        category_mod_private = ident("CATEGORY_MOD_PRIVATE")
        channel_showcase = ident("CHANNEL_SHOWCASE")
        channel_feedback = ident("CHANNEL_FEEDBACK")
        channel_modlog = ident("CHANNEL_MODLOG")
        channel_auto_mod = ident("CHANNEL_AUTO_MOD")
        channel_mod_bot_stuff = ident("CHANNEL_MOD_BOT_STUFF")
        channel_bot_messages = ident("CHANNEL_BOT_MESSAGES")
        channel_bot_traffic = ident("CHANNEL_BOT_TRAFFIC")
        channel_tech_support = ident("CHANNEL_TECH_SUPPORT")
        channel_mod_polls = ident("CHANNEL_MOD_POLLS")
        try:
            channel_attachment_dump: int | None = ident("CHANNEL_ATTACHMENT_DUMP")
        except (KeyError, ValueError):
            channel_attachment_dump = None
        attachment_cache_path = parse_required_env_var("ATTACHMENT_CACHE_PATH", Path, env)
        attachment_cache_max_size = ident("ATTACHMENT_CACHE_MAX_SIZE")

        return cls(
            discord_token=discord_token,
            guild=guild,
            role_mod=role_mod,
            role_helper=role_helper,
            role_mute=role_mute,
            roles_color=roles_color,
            category_mod_private=category_mod_private,
            channel_showcase=channel_showcase,
            channel_feedback=channel_feedback,
            channel_modlog=channel_modlog,
            channel_mod_bot_stuff=channel_mod_bot_stuff,
            channel_auto_mod=channel_auto_mod,
            channel_bot_messages=channel_bot_messages,
            channel_bot_traffic=channel_bot_traffic,
            channel_tech_support=channel_tech_support,
            channel_mod_polls=channel_mod_polls,
            channel_attachment_dump=channel_attachment_dump,
            attachment_cache_path=attachment_cache_path,
            attachment_cache_max_size=attachment_cache_max_size,
        )