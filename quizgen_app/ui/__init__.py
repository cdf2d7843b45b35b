"""Qt UI components for the QuizGen desktop client."""

from .dialog_helpers import (
    confirm_abandon_quiz,
    confirm_submit,
    show_error,
    show_info,
    show_warning,
)
from .qt_tick_scheduler import QtTickScheduler
from .question_renderer import render_question, render_review
from .quiz_main_window import QuizMainWindow

__all__ = [
    "QuizMainWindow",
    "QtTickScheduler",
    "confirm_abandon_quiz",
    "confirm_submit",
    "show_error",
    "show_info",
    "show_warning",
    "render_question",
    "render_review",
]
