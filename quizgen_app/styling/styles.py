"""Centralized styles and font definitions for the application."""

from .color_palette import ColorPalette, Theme

TIMER_WARNING_SECONDS = 60


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:checked {{
                background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
                border: 1px solid {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_SECONDARY.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QSpinBox, QComboBox {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QGroupBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 10px;
                padding: 0 3px 0 3px;
            }}
        """

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"

    @staticmethod
    def get_navigator_cell_style(status: str, is_current: bool, theme: Theme = Theme.LIGHT) -> str:
        background = ColorPalette.navigator_color(status, theme)
        text = ColorPalette.TEXT_PRIMARY.get(theme) if status == "unanswered" else "#FFFFFF"
        border = ColorPalette.BORDER_FOCUS.get(theme) if is_current else "transparent"
        return (
            f"background-color: {background}; color: {text}; font-weight: bold;"
            f" border: 3px solid {border}; border-radius: 6px;"
        )

    @staticmethod
    def get_option_button_style(selected: bool, theme: Theme = Theme.LIGHT) -> str:
        if not selected:
            return "text-align: left; padding: 10px;"
        return (
            f"text-align: left; padding: 10px;"
            f" background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};"
            f" color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};"
        )

    @staticmethod
    def get_timer_style(remaining_seconds: int, theme: Theme = Theme.LIGHT) -> str:
        color = (
            ColorPalette.ERROR.get(theme)
            if remaining_seconds <= TIMER_WARNING_SECONDS
            else ColorPalette.TEXT_PRIMARY.get(theme)
        )
        return f"font-size: 16pt; font-weight: bold; color: {color};"

    @staticmethod
    def get_outcome_style(is_correct: bool, theme: Theme = Theme.LIGHT) -> str:
        color = ColorPalette.SUCCESS.get(theme) if is_correct else ColorPalette.ERROR.get(theme)
        return f"color: {color}; font-weight: bold;"
