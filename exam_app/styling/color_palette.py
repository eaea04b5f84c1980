"""Light and dark colors used by the professor console."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """A color with one value per theme."""

    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Named colors; widgets ask for ``ColorPalette.X.get(theme)``."""

    TEXT = ThemeColors(light="#111111", dark="#F5F5F5")
    TEXT_MUTED = ThemeColors(light="#666666", dark="#AAAAAA")

    SURFACE = ThemeColors(light="#FFFFFF", dark="#1E1E1E")
    SURFACE_ALT = ThemeColors(light="#F5F5F5", dark="#2D2D2D")
    SELECTION = ThemeColors(light="#E6F1FB", dark="#27415C")

    ACCENT = ThemeColors(light="#0078D4", dark="#4A9EFF")
    ACCENT_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    HOVER = ThemeColors(light="#E8E8E8", dark="#505050")
    BORDER = ThemeColors(light="#D1D1D1", dark="#555555")

    # Grading outcome
    PASS = ThemeColors(light="#107C10", dark="#6FCF6F")
    FAIL = ThemeColors(light="#D13438", dark="#FF6B6B")
