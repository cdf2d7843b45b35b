"""Component showing the score and a per-question review after submission."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from quizgen_app.constants.ui_constants import NEW_QUIZ_BUTTON, RETAKE_BUTTON, TIME_UP_MESSAGE
from quizgen_app.core.quiz_manager import SessionView
from quizgen_app.styling.styles import Styles
from quizgen_app.ui.question_renderer import render_review
from quizgen_app.utils.time_format import format_clock, format_score


class ResultsPanel(QWidget):
    """UI component summarizing a submitted quiz."""

    def __init__(
        self,
        on_retake: Callable[[], None],
        on_new_quiz: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_retake = on_retake
        self.on_new_quiz = on_new_quiz
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel("Results", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.title_label)

        self.time_up_label = QLabel(TIME_UP_MESSAGE, self)
        self.time_up_label.setVisible(False)
        layout.addWidget(self.time_up_label)

        stats_group = QGroupBox("Summary", self)
        stats_layout = QGridLayout()
        stats_group.setLayout(stats_layout)
        self.stat_labels: dict[str, QLabel] = {}
        captions = (
            ("score", "Score"),
            ("percentage", "Percentage"),
            ("correct", "Correct"),
            ("wrong", "Wrong"),
            ("unanswered", "Unanswered"),
            ("time", "Time taken"),
        )
        for column, (key, caption) in enumerate(captions):
            stats_layout.addWidget(QLabel(caption, stats_group), 0, column)
            value_label = QLabel("-", stats_group)
            value_label.setStyleSheet(Styles.get_large_label_style())
            stats_layout.addWidget(value_label, 1, column)
            self.stat_labels[key] = value_label
        layout.addWidget(stats_group)

        self.review_view = QWebEngineView(self)
        layout.addWidget(self.review_view, stretch=1)

        button_row = QHBoxLayout()
        button_row.addStretch()
        self.retake_button = QPushButton(RETAKE_BUTTON, self)
        self.retake_button.clicked.connect(self.on_retake)
        button_row.addWidget(self.retake_button)

        self.new_quiz_button = QPushButton(NEW_QUIZ_BUTTON, self)
        self.new_quiz_button.clicked.connect(self.on_new_quiz)
        button_row.addWidget(self.new_quiz_button)
        layout.addLayout(button_row)

    def show_result(self, view: SessionView) -> None:
        result = view.result
        if result is None:
            return
        self.title_label.setText(f"Results: {view.settings.topic}")
        self.time_up_label.setVisible(view.state.remaining_seconds == 0)

        self.stat_labels["score"].setText(format_score(result.score))
        self.stat_labels["percentage"].setText(f"{result.percentage:.1f}%")
        self.stat_labels["correct"].setText(str(result.correct_count))
        self.stat_labels["wrong"].setText(str(result.wrong_count))
        self.stat_labels["unanswered"].setText(str(result.unanswered_count))
        self.stat_labels["time"].setText(format_clock(result.elapsed_seconds))
        self.stat_labels["correct"].setStyleSheet(Styles.get_outcome_style(True))
        self.stat_labels["wrong"].setStyleSheet(Styles.get_outcome_style(False))

        self.review_view.setHtml(render_review(view.state.questions, result))
