"""Colour tokens poured between vessels."""

from __future__ import annotations

from enum import IntEnum


class ColorToken(IntEnum):
    RED = 0
    BLUE = 1
    GREEN = 2
    YELLOW = 3
    PURPLE = 4
    ORANGE = 5
    PINK = 6
    CYAN = 7
    BROWN = 8
    LIME = 9
    MAGENTA = 10
    TEAL = 11

    @property
    def code(self) -> str:
        """Single-character code used in canonical keys and compact dumps."""
        return _CODES[self.value]

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> ColorToken:
        """Look up a token by (case-insensitive) name, e.g. ``"red"``."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown colour {name!r}.") from None


_CODES = "abcdefghijkl"
