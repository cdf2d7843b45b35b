"""Component collecting the topic and settings for a new quiz."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from quizgen_app.constants.quiz_constants import (
    DEFAULT_PENALTY,
    DEFAULT_QUESTION_COUNT,
    MAX_QUESTIONS,
    MAX_TIMER_MINUTES,
    MIN_QUESTIONS,
    MIN_TIMER_MINUTES,
    PENALTY_CHOICES,
    TIMER_MINUTES_PER_QUESTION,
)
from quizgen_app.constants.ui_constants import (
    GENERATE_BUTTON,
    GENERATING_BUTTON,
    PLACEHOLDER_TOPIC,
    TOPIC_REQUIRED_MESSAGE,
)
from quizgen_app.core.models import Difficulty, QuizSettings
from quizgen_app.core.services.quiz_session import InvalidQuizInputError, build_quiz_settings
from quizgen_app.styling.styles import Styles


class GeneratorPanel(QWidget):
    """UI component for describing a quiz and requesting its generation."""

    def __init__(
        self,
        on_generate: Callable[[QuizSettings], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_generate = on_generate
        self._timer_edited_manually = False
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        title = QLabel("Generate Quiz", self)
        title.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(title)

        self.topic_input = QPlainTextEdit(self)
        self.topic_input.setPlaceholderText(PLACEHOLDER_TOPIC)
        layout.addWidget(self.topic_input, stretch=1)

        form = QFormLayout()
        self.count_spinbox = QSpinBox(self)
        self.count_spinbox.setRange(MIN_QUESTIONS, MAX_QUESTIONS)
        self.count_spinbox.setValue(DEFAULT_QUESTION_COUNT)
        self.count_spinbox.valueChanged.connect(self._handle_count_changed)
        form.addRow("Number of questions:", self.count_spinbox)

        self.difficulty_combo = QComboBox(self)
        for difficulty in Difficulty:
            self.difficulty_combo.addItem(difficulty.value.capitalize(), userData=difficulty)
        self.difficulty_combo.setCurrentIndex(list(Difficulty).index(Difficulty.MEDIUM))
        form.addRow("Difficulty:", self.difficulty_combo)

        self.timer_spinbox = QSpinBox(self)
        self.timer_spinbox.setRange(MIN_TIMER_MINUTES, MAX_TIMER_MINUTES)
        self.timer_spinbox.setSuffix(" min")
        self.timer_spinbox.setValue(DEFAULT_QUESTION_COUNT * TIMER_MINUTES_PER_QUESTION)
        self.timer_spinbox.editingFinished.connect(self._handle_timer_edited)
        form.addRow("Time limit:", self.timer_spinbox)

        penalty_row = QHBoxLayout()
        self.negative_marking_checkbox = QCheckBox("Negative marking", self)
        self.negative_marking_checkbox.toggled.connect(self._handle_negative_marking_toggle)
        penalty_row.addWidget(self.negative_marking_checkbox)

        self.penalty_combo = QComboBox(self)
        for penalty in PENALTY_CHOICES:
            self.penalty_combo.addItem(f"{penalty:g} per wrong answer", userData=penalty)
        self.penalty_combo.setCurrentIndex(PENALTY_CHOICES.index(DEFAULT_PENALTY))
        self.penalty_combo.setEnabled(False)
        penalty_row.addWidget(self.penalty_combo)
        penalty_row.addStretch()
        form.addRow(penalty_row)

        layout.addLayout(form)

        self.generate_button = QPushButton(GENERATE_BUTTON, self)
        self.generate_button.clicked.connect(self._handle_generate)
        layout.addWidget(self.generate_button)

        self.status_label = QLabel("", self)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

    def _handle_count_changed(self, count: int) -> None:
        if not self._timer_edited_manually:
            self.timer_spinbox.setValue(count * TIMER_MINUTES_PER_QUESTION)

    def _handle_timer_edited(self) -> None:
        self._timer_edited_manually = (
            self.timer_spinbox.value() != self.count_spinbox.value() * TIMER_MINUTES_PER_QUESTION
        )

    def _handle_negative_marking_toggle(self, checked: bool) -> None:
        self.penalty_combo.setEnabled(checked)

    def _handle_generate(self) -> None:
        if not self.topic_input.toPlainText().strip():
            self.set_status_message(TOPIC_REQUIRED_MESSAGE)
            return
        try:
            settings = self.build_settings()
        except InvalidQuizInputError as exc:
            self.set_status_message(str(exc))
            return
        self.on_generate(settings)

    def build_settings(self, topic: str | None = None, total_questions: int | None = None) -> QuizSettings:
        """Settings from the form; ``topic``/``total_questions`` override it for imported quizzes."""
        negative_marking = self.negative_marking_checkbox.isChecked()
        return build_quiz_settings(
            topic=topic if topic is not None else self.topic_input.toPlainText(),
            difficulty=self.difficulty_combo.currentData(),
            total_questions=total_questions if total_questions is not None else self.count_spinbox.value(),
            timer_minutes=self.timer_spinbox.value() if self._timer_edited_manually else None,
            negative_marking_enabled=negative_marking,
            penalty_per_wrong=self.penalty_combo.currentData() if negative_marking else 0.0,
        )

    def set_busy(self, busy: bool) -> None:
        self.generate_button.setEnabled(not busy)
        self.generate_button.setText(GENERATING_BUTTON if busy else GENERATE_BUTTON)
        self.topic_input.setReadOnly(busy)

    def set_status_message(self, message: str) -> None:
        self.status_label.setText(message)
