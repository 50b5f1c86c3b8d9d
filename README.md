# robbb

The shared core of a Discord moderation bot, with no dependency on any
Discord client library and no runtime dependencies at all. It provides:

- **Storage** (`robbb.database.Db`): a SQLite store for blocklist patterns,
  tags, user "fetch" profiles, emoji usage statistics, highlight triggers,
  moderator actions and mutes.
- **Configuration** (`robbb.config.Config`): the bot token and the guild,
  role and channel ids, read from environment variables.
- **Embeds** (`robbb.embeds`, `robbb.paginated_embeds`): embeds as plain
  dataclasses, and pagination of long field lists.
- **Emotes** (`robbb.emotes`): the guild emotes used to decorate replies.
- **Models** (`robbb.models`): small `User`, `Attachment` and `Message`
  dataclasses.
- **Helpers** (`robbb.util`): ordinals, truncation, chat timestamps,
  snowflakes, message links, emoji parsing and URL validation.

## Installation

```
pip install .
```

Python 3.10 or newer is required.

## Helpers

```python
from robbb.util import format_count, ellipsis_text, split_at_word, pluralize

format_count(1)     # "1st"
format_count(12)    # "12th"
format_count(23)    # "23rd"

ellipsis_text("a rather long sentence", 10)   # "a rathe..."
split_at_word("foo bar baz", "bar")           # ("foo", "baz")
pluralize("entrys")                            # "entries"
```

`ellipsis_text` counts UTF-8 bytes and never cuts a character in half.
`thread_title_from_text` takes the first non-blank line, shortened to 96
bytes, and raises `ValueError` for blank text. `format_date`,
`format_date_ago` and `format_date_detailed` produce `<t:...>` chat
timestamps; `format_date_before_plaintext` gives a rough English distance
such as `"3 days ago"`. `find_emojis` / `parse_emoji` return
`EmojiIdentifier` values for custom emoji found in text, `validate_url`
accepts URLs with a scheme and a domain name (not a bare IP address),
`is_image_file` checks for png, jpg, jpeg, gif and webp, and
`time_to_discord_snowflake` together with `generate_message_link` links to a
point in a channel's history. `required_env_var` and `parse_required_env_var`
read a variable from the environment or from a given mapping, raising
`KeyError` when it is missing and `ValueError` when it cannot be parsed.

## Configuration

`Config.from_environment(environ=None)` reads `TOKEN`, `GUILD`, `ROLE_MOD`,
`ROLE_HELPER`, `ROLE_MUTE`, `ROLES_COLOR` (comma separated ids),
`CATEGORY_MOD_PRIVATE`, `CHANNEL_SHOWCASE`, `CHANNEL_FEEDBACK`,
`CHANNEL_MODLOG`, `CHANNEL_AUTO_MOD`, `CHANNEL_MOD_BOT_STUFF`,
`CHANNEL_BOT_MESSAGES`, `CHANNEL_BOT_TRAFFIC`, `CHANNEL_TECH_SUPPORT`,
`CHANNEL_MOD_POLLS`, `ATTACHMENT_CACHE_PATH` and `ATTACHMENT_CACHE_MAX_SIZE`.
All are required except `CHANNEL_ATTACHMENT_DUMP`, which becomes `None` when
missing or unparsable. Ids must be unsigned 64-bit integers. Pass a mapping
instead of the process environment when testing.

## Storage

```python
from robbb.database import Db

with Db.connect("sqlite:bot.db") as db:
    db.run_migrations("migrations")
    db.set_tag(1, "rules", "Be nice.", True, None)
    db.get_tag("RULES")  # lookup ignores case
```

`Db.from_environment()` opens the database named by `DATABASE_URL`.
`run_migrations(directory)` applies the scripts named
`<version>_<description>.sql` (or `.up.sql`; `.down.sql` files are skipped)
that have not been applied yet, in version order, records them in a
`_migrations` table, and returns the versions applied; any failure is raised
as `RuntimeError`.

The `Db` object offers:

- `get_blocklist`, `add_blocklist_entry`, `remove_blocklist_entry`,
  `get_combined_blocklist_regex` (case-insensitive; matches nothing when the
  list is empty)
- `set_tag`, `get_tag`, `delete_tag`, `list_tags`
- `set_fetch`, `get_fetch`, `update_fetch`, `get_all_fetches`, with fields
  from `robbb.fetch_field.FetchField` (`FetchField.parse` accepts common
  aliases and raises `FetchFieldParseError`)
- `alter_emoji_reaction_count`, `alter_emoji_text_count` (counts never drop
  below zero), `get_emoji_usage_by_id`, `get_emoji_usage_by_name`
  (`LookupError` if unknown), `get_top_emoji_stats` with an `Ordering`
- `get_highlights` (a `HighlightsData`), `set_highlight`, `remove_highlight`,
  `rm_highlights_of`, `remove_forbidden_highlights`
- `add_mod_action`, `get_mod_actions` (newest first), `get_mod_action`
  (`LookupError` if missing), `count_mod_actions`, `count_all_mod_actions`,
  `remove_mod_action`, `edit_mod_action_reason`, using `ModActionType` and
  `ModActionKind` (a mute carries an end time and an active flag)
- `get_mutes`, `get_active_mute`, `get_newly_expired_mutes`,
  `remove_active_mutes`, `set_mute_inactive`

Blocklist patterns, highlights and tag names are cached in memory after the
first read and kept up to date by every write through the same `Db`.

## Embeds

`make_create_embed(up_emotes, build)` returns a timestamped `Embed` whose
footer shows a random "stare" emote; `make_success_embed`,
`make_success_mod_action_embed` and `make_error_embed` build coloured
one-line replies. `PaginatedEmbed.create_from_fields` spreads fields over
pages of at most twelve, titling them `"title (n/m)"` when there is more than
one page; `next_page_index` and `make_paginate_components` describe the
back/forward buttons.

## What this package does not do

- It does not connect to Discord, run a bot, or send, edit or listen to
  messages; embeds and buttons are plain data for a client to deliver.
- It ships no database schema: `run_migrations` needs a directory of SQL
  scripts creating the `blocked_regexes`, `tag`, `fetch`, `emoji_stats`,
  `highlights`, `mod_action` and `mute` tables.
- It ships no list of forbidden highlight words;
  `HighlightsMixin.forbidden_highlight_words` is empty until a subclass sets it.

## Running the tests

```
pip install ".[test]"
pytest
```