"""Color palette for QuizGen supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    # Text
    TEXT_PRIMARY = ThemeColors(light="#000000", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#666666", dark="#AAAAAA")

    # Background
    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1E1E1E")

    # Outcome colors
    SUCCESS = ThemeColors(light="#107C10", dark="#6FCF6F")
    ERROR = ThemeColors(light="#D13438", dark="#FF6B6B")

    # Borders
    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#555555")
    BORDER_FOCUS = ThemeColors(light="#0078D4", dark="#4A9EFF")

    # Buttons
    BUTTON_PRIMARY_BG = ThemeColors(light="#0078D4", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E8E8E8", dark="#505050")

    # Question navigator cells, keyed by AnswerRecord.status
    NAV_ANSWERED = ThemeColors(light="#107C10", dark="#3FA43F")
    NAV_REVIEW = ThemeColors(light="#8A4FD8", dark="#B085F5")
    NAV_UNANSWERED = ThemeColors(light="#E8E8E8", dark="#3A3A3A")

    @classmethod
    def navigator_color(cls, status: str, theme: Theme = Theme.LIGHT) -> str:
        colors = {
            "answered": cls.NAV_ANSWERED,
            "review": cls.NAV_REVIEW,
            "unanswered": cls.NAV_UNANSWERED,
        }
        return colors.get(status, cls.NAV_UNANSWERED).get(theme)
