from datetime import datetime, timedelta, timezone

import pytest

from robbb.util import (
    DISCORD_EPOCH_MS,
    EmojiIdentifier,
    bot_version,
    ellipsis_text,
    find_emojis,
    format_count,
    format_date,
    format_date_ago,
    format_date_before_plaintext,
    format_date_detailed,
    generate_message_link,
    is_image_file,
    parse_backticked_string,
    parse_emoji,
    parse_required_env_var,
    pluralize,
    required_env_var,
    split_at_word,
    split_once_at,
    thread_title_from_text,
    time_after_duration,
    time_to_discord_snowflake,
    validate_url,
)

UTC = timezone.utc


def test_ellipsis_text_short_text_unchanged():
    assert ellipsis_text("hello", 20) == "hello"


def test_ellipsis_text_cuts_long_text():
    text = "abcdefghijklmnop"
    result = ellipsis_text(text, 8)
    assert result.endswith("...")
    assert len(result.encode()) <= 8
    assert text.startswith(result[:-3])


def test_ellipsis_text_respects_char_boundaries():
    text = "é" * 10
    result = ellipsis_text(text, 8)
    assert result.endswith("...")
    assert len(result.encode()) <= 8
    assert set(result[:-3]) == {"é"}


def test_ellipsis_text_too_small_limit():
    with pytest.raises(ValueError):
        ellipsis_text("a long text", 2)


def test_thread_title_skips_blank_lines():
    assert thread_title_from_text("\n   \r\nHello world\nsecond") == "Hello world"


def test_thread_title_is_shortened():
    title = thread_title_from_text("x" * 200)
    assert len(title) <= 96
    assert title.endswith("...")


def test_thread_title_empty_text():
    with pytest.raises(ValueError):
        thread_title_from_text(" \n\n  ")


def test_required_env_var_present():
    assert required_env_var("TOKEN", {"TOKEN": "token"}) == "token"


def test_required_env_var_missing():
    with pytest.raises(KeyError, match="GUILD"):
        required_env_var("GUILD", {})


def test_parse_required_env_var_parses():
    assert parse_required_env_var("GUILD", int, {"GUILD": "1234"}) == 1234


def test_parse_required_env_var_bad_value():
    with pytest.raises(ValueError, match="GUILD") as info:
        parse_required_env_var("GUILD", int, {"GUILD": "abc"})
    assert isinstance(info.value.__cause__, ValueError)


def test_parse_required_env_var_missing():
    with pytest.raises(KeyError):
        parse_required_env_var("GUILD", int, {})


def test_time_after_duration_is_in_future():
    before = datetime.now(UTC)
    result = time_after_duration(timedelta(hours=1))
    after = datetime.now(UTC)
    assert before + timedelta(hours=1) <= result <= after + timedelta(hours=1)


def test_time_after_duration_overflow_gives_now():
    before = datetime.now(UTC)
    result = time_after_duration(timedelta(days=999_999_999))
    assert before <= result <= datetime.now(UTC)


def test_format_dates():
    date = datetime.fromtimestamp(1700000000, UTC)
    assert format_date_ago(date) == "<t:1700000000:R>"
    assert format_date(date) == "<t:1700000000>"
    assert format_date_detailed(date) == "<t:1700000000> (<t:1700000000:R>)"


def test_format_date_before_plaintext_now():
    date = datetime(2022, 5, 1, tzinfo=UTC)
    assert format_date_before_plaintext(date, date) == "now"


def test_format_date_before_plaintext_days():
    b = datetime(2022, 5, 1, tzinfo=UTC)
    assert format_date_before_plaintext(b - timedelta(days=3), b) == "3 days ago"


def test_format_date_before_plaintext_hour():
    b = datetime(2022, 5, 1, tzinfo=UTC)
    assert format_date_before_plaintext(b - timedelta(hours=1), b) == "an hour ago"


def test_format_date_before_plaintext_ignores_direction():
    b = datetime(2022, 5, 1, tzinfo=UTC)
    assert format_date_before_plaintext(b + timedelta(days=1), b) == "a day ago"


@pytest.mark.parametrize(
    "num, suffix",
    [
        (1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (0, "th"),
        (11, "th"), (12, "th"), (13, "th"), (21, "st"), (22, "nd"),
        (23, "rd"), (111, "th"), (112, "th"), (101, "st"), (-1, "th"),
    ],
)
def test_format_count(num, suffix):
    result = format_count(num)
    assert result.startswith(str(num))
    assert result[len(str(num)):] == suffix


def test_find_emojis():
    text = "hi <:pepe:123456789012345678> and <a:dance_1:987654321098765432>!"
    assert find_emojis(text) == [
        EmojiIdentifier(id=123456789012345678, name="pepe", animated=False),
        EmojiIdentifier(id=987654321098765432, name="dance_1", animated=True),
    ]


def test_find_emojis_ignores_short_ids():
    assert find_emojis("<:pepe:12345> <:x:123456789012345678>") == []


def test_parse_emoji_valid():
    emoji = parse_emoji("<a:wave:123456789012345678>")
    assert emoji == EmojiIdentifier(id=123456789012345678, name="wave", animated=True)


@pytest.mark.parametrize(
    "value",
    ["<:a>", "plain text", "<:name:notanumber>", "<:name:123456789012345678", "<:" + "n" * 60 + ":1>"],
)
def test_parse_emoji_invalid(value):
    assert parse_emoji(value) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://example.com/path?q=1", True),
        ("http://sub.example.com", True),
        ("not a url", False),
        ("https://127.0.0.1/", False),
        ("https://[::1]/", False),
        ("mailto:user@example.com", False),
        ("", False),
    ],
)
def test_validate_url(value, expected):
    assert validate_url(value) is expected


def test_pluralize():
    result = pluralize("entrys")
    assert result.startswith("entr") and result.endswith("ies")
    assert pluralize("cat") == "cat"


def test_parse_backticked_string():
    assert parse_backticked_string("`code`") == "code"
    assert parse_backticked_string("``") == ""
    assert parse_backticked_string("`") is None
    assert parse_backticked_string("code`") is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a.png", True), ("photo.tar.jpeg", True), ("x.webp", True), ("x.gif", True),
        ("x.jpg", True), ("x.PNG", False), ("x.txt", False), ("png", True), ("noext", False),
    ],
)
def test_is_image_file(name, expected):
    assert is_image_file(name) is expected


def test_bot_version(monkeypatch):
    monkeypatch.setenv("VERSION", "1.2.3")
    assert bot_version() == "1.2.3"
    monkeypatch.delenv("VERSION")
    assert bot_version() == "<no version>"


def test_snowflake_at_epoch():
    epoch = datetime.fromtimestamp(DISCORD_EPOCH_MS / 1000, UTC)
    assert time_to_discord_snowflake(epoch) == 0
    assert time_to_discord_snowflake(epoch + timedelta(milliseconds=1)) == 1 << 22


def test_snowflake_encodes_millis():
    date = datetime(2023, 3, 4, 5, 6, 7, 891000, tzinfo=UTC)
    millis = int(date.timestamp() * 1000)
    assert (time_to_discord_snowflake(date) >> 22) + DISCORD_EPOCH_MS == millis


def test_generate_message_link():
    assert generate_message_link(1, 2, 3) == "https://discord.com/channels/1/2/3"
    assert generate_message_link(None, 2, 3) == "https://discord.com/channels/@me/2/3"


def test_split_once_at():
    assert split_once_at("key=value=x", "=") == ("key", "value=x")
    assert split_once_at("novalue", "=") is None
    assert split_once_at("aéb", "é") == ("a", "b")


def test_split_at_word():
    assert split_at_word("foo bar baz", "bar") == ("foo", "baz")
    assert split_at_word("  one two three  ", "one") == ("", "two three")


def test_split_at_word_missing():
    assert split_at_word(" foo baz ", "bar") == (" foo baz ", "")