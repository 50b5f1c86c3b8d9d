import pytest

from robbb.fetch_field import FETCH_KEY_ORDER, FetchField, FetchFieldParseError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("distro", FetchField.DISTRO),
        ("KERNEL", FetchField.KERNEL),
        ("de", FetchField.DEWM),
        ("wm", FetchField.DEWM),
        ("DE/WM", FetchField.DEWM),
        ("dewm", FetchField.DEWM),
        ("Display Protocol", FetchField.DISPLAY_PROTOCOL),
        ("gtk", FetchField.GTK3),
        ("theme", FetchField.GTK3),
        ("gtk theme", FetchField.GTK3),
        ("icon theme", FetchField.ICONS),
        ("Icons", FetchField.ICONS),
        ("cpu", FetchField.CPU),
        ("Dotfiles", FetchField.DOTFILES),
        ("image", FetchField.IMAGE),
    ],
)
def test_parse_aliases(text, expected):
    assert FetchField.parse(text) is expected


@pytest.mark.parametrize("text", ["", "distribution", "display", "\u212aernel"])
def test_parse_invalid(text):
    with pytest.raises(FetchFieldParseError, match="Not a valid fetch field"):
        FetchField.parse(text)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        FetchField.parse("nope")


@pytest.mark.parametrize(
    "text, display",
    [
        ("dewm", "DE/WM"),
        ("display protocol", "Display Protocol"),
        ("gtk3 theme", "GTK3 Theme"),
        ("gtk icon theme", "GTK Icon Theme"),
        ("image", "Image"),
        ("cpu", "CPU"),
    ],
)
def test_display_names(text, display):
    assert str(FetchField.parse(text)) == display


def test_stored_names_round_trip():
    assert FetchField.IMAGE.value == "image"
    for field in FetchField:
        assert FetchField(field.value) is field


def test_key_order():
    assert len(FETCH_KEY_ORDER) == 18
    assert FETCH_KEY_ORDER[0] is FetchField.DISTRO
    assert FETCH_KEY_ORDER[-1] is FetchField.IMAGE
    choices = FetchField.choices()
    assert len(choices) == 18
    assert choices[0] == ("Distro", "Distro")
    assert choices[-1] == ("Image", "Image")


def test_choices_parse_back_in_order():
    choices = FetchField.choices()
    assert [FetchField.parse(value) for _, value in choices] == list(FETCH_KEY_ORDER)
    assert all(name == value for name, value in choices)