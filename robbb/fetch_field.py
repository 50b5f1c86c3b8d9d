"""The fields a user can fill in on their system fetch."""

from __future__ import annotations

import string
from enum import Enum


class FetchFieldParseError(ValueError):
    """Raised when a string names no fetch field."""

    def __init__(self, value: str = "") -> None:
        super().__init__("Not a valid fetch field")
        self.value = value


class FetchField(Enum):
    """A fetch field; its value is the name it is stored under."""

    DISTRO = "Distro"
    KERNEL = "Kernel"
    TERMINAL = "Terminal"
    EDITOR = "Editor"
    DEWM = "DE/WM"
    BAR = "Bar"
    RESOLUTION = "Resolution"
    DISPLAY_PROTOCOL = "Display Protocol"
    SHELL = "Shell"
    GTK3 = "GTK3 Theme"
    ICONS = "GTK Icon Theme"
    CPU = "CPU"
    GPU = "GPU"
    MEMORY = "Memory"
    DESCRIPTION = "Description"
    GIT = "Git"
    DOTFILES = "Dotfiles"
    IMAGE = "image"

    def __str__(self) -> str:
        return "Image" if self is FetchField.IMAGE else self.value

    @classmethod
    def parse(cls, s: str) -> FetchField:
        """Parse a field name case-insensitively, accepting common aliases."""
        try:
            return _ALIASES[s.translate(_ASCII_LOWER)]
        except KeyError:
            raise FetchFieldParseError(s) from None

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        """(name, value) pairs offered for selection, in display order."""
        return [(str(member), str(member)) for member in cls]


FETCH_KEY_ORDER: tuple[FetchField, ...] = tuple(FetchField)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_ALIASES: dict[str, FetchField] = {
    "distro": FetchField.DISTRO,
    "kernel": FetchField.KERNEL,
    "terminal": FetchField.TERMINAL,
    "editor": FetchField.EDITOR,
    "dewm": FetchField.DEWM,
    "de": FetchField.DEWM,
    "wm": FetchField.DEWM,
    "de/wm": FetchField.DEWM,
    "bar": FetchField.BAR,
    "resolution": FetchField.RESOLUTION,
    "display protocol": FetchField.DISPLAY_PROTOCOL,
    "shell": FetchField.SHELL,
    "gtk theme": FetchField.GTK3,
    "gtk3 theme": FetchField.GTK3,
    "theme": FetchField.GTK3,
    "gtk": FetchField.GTK3,
    "icons": FetchField.ICONS,
    "icon theme": FetchField.ICONS,
    "gtk icon theme": FetchField.ICONS,
    "cpu": FetchField.CPU,
    "gpu": FetchField.GPU,
    "memory": FetchField.MEMORY,
    "description": FetchField.DESCRIPTION,
    "git": FetchField.GIT,
    "dotfiles": FetchField.DOTFILES,
    "image": FetchField.IMAGE,
}