"""Component for answering a running quiz under the countdown."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt, QTimer
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

from quizgen_app.constants.quiz_constants import OPTION_LETTERS
from quizgen_app.constants.ui_constants import (
    MARK_BUTTON,
    MARKED_BUTTON,
    NAVIGATOR_COLUMNS,
    NEXT_BUTTON,
    PREV_BUTTON,
    SESSION_REFRESH_INTERVAL_MS,
    SUBMIT_BUTTON,
)
from quizgen_app.core.quiz_manager import QuizManager, SessionView
from quizgen_app.styling.styles import Styles
from quizgen_app.ui.dialog_helpers import confirm_submit
from quizgen_app.ui.question_renderer import render_question
from quizgen_app.utils.time_format import format_clock


class SessionPanel(QWidget):
    """UI component showing one question at a time plus the question navigator."""

    def __init__(
        self,
        quiz_manager: QuizManager,
        on_submitted: Callable[[SessionView], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.quiz_manager = quiz_manager
        self.on_submitted = on_submitted

        self._session_id: str | None = None
        self._rendered_index: int | None = None
        self._navigator_buttons: list[QPushButton] = []

        self._build_ui()
        self._configure_refresh_timer()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.topic_label = QLabel("", self)
        self.topic_label.setWordWrap(True)
        header_row.addWidget(self.topic_label, stretch=1)
        self.progress_label = QLabel("", self)
        header_row.addWidget(self.progress_label)
        self.timer_label = QLabel("", self)
        self.timer_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        header_row.addWidget(self.timer_label)
        layout.addLayout(header_row)

        self.question_view = QWebEngineView(self)
        layout.addWidget(self.question_view, stretch=2)

        options_grid = QGridLayout()
        self.option_buttons: list[QPushButton] = []
        for index, letter in enumerate(OPTION_LETTERS):
            button = QPushButton(letter, self)
            button.setMinimumHeight(48)
            button.clicked.connect(lambda _checked=False, i=index: self._handle_select(i))
            options_grid.addWidget(button, index // 2, index % 2)
            self.option_buttons.append(button)
        layout.addLayout(options_grid)

        control_row = QHBoxLayout()
        self.prev_button = QPushButton(PREV_BUTTON, self)
        self.prev_button.clicked.connect(self._handle_previous)
        control_row.addWidget(self.prev_button)

        self.mark_button = QPushButton(MARK_BUTTON, self)
        self.mark_button.clicked.connect(self._handle_toggle_review)
        control_row.addWidget(self.mark_button)

        self.next_button = QPushButton(NEXT_BUTTON, self)
        self.next_button.clicked.connect(self._handle_next)
        control_row.addWidget(self.next_button)

        control_row.addStretch()
        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.clicked.connect(self._handle_submit)
        control_row.addWidget(self.submit_button)
        layout.addLayout(control_row)

        self.navigator_group = QGroupBox("Questions", self)
        self.navigator_layout = QGridLayout()
        self.navigator_group.setLayout(self.navigator_layout)
        layout.addWidget(self.navigator_group)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(SESSION_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self.refresh)

    # --- Session lifecycle ---

    def attach(self, session_id: str) -> None:
        """Show the given session and follow its countdown."""
        self._session_id = session_id
        self._rendered_index = None
        view = self.quiz_manager.get_session(session_id)
        self._build_navigator(len(view.state.questions))
        self.topic_label.setText(view.settings.topic)
        self._render(view)
        self.refresh_timer.start()

    def detach(self) -> None:
        self.refresh_timer.stop()
        self._session_id = None

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def refresh(self) -> None:
        if self._session_id is None:
            return
        self._render(self.quiz_manager.get_session(self._session_id))

    # --- Rendering ---

    def _build_navigator(self, question_count: int) -> None:
        for button in self._navigator_buttons:
            self.navigator_layout.removeWidget(button)
            button.deleteLater()
        self._navigator_buttons = []
        for index in range(question_count):
            button = QPushButton(str(index + 1), self.navigator_group)
            button.setFixedSize(40, 40)
            button.clicked.connect(lambda _checked=False, i=index: self._handle_go_to(i))
            self.navigator_layout.addWidget(button, index // NAVIGATOR_COLUMNS, index % NAVIGATOR_COLUMNS)
            self._navigator_buttons.append(button)

    def _render(self, view: SessionView) -> None:
        state = view.state
        if state.submitted:
            self.detach()
            self.on_submitted(view)
            return

        index = state.current_index
        question = state.questions[index]
        answer = state.answers[index]
        total = len(state.questions)

        self.timer_label.setText(format_clock(state.remaining_seconds))
        self.timer_label.setStyleSheet(Styles.get_timer_style(state.remaining_seconds))
        self.progress_label.setText(f"Question {index + 1} of {total}")

        if self._rendered_index != index:
            self.question_view.setHtml(render_question(question, index + 1, total))
            self._rendered_index = index

        for option_index, button in enumerate(self.option_buttons):
            button.setText(f"{OPTION_LETTERS[option_index]}. {question.options[option_index]}")
            button.setStyleSheet(
                Styles.get_option_button_style(answer.selected_option_index == option_index)
            )

        self.mark_button.setText(MARKED_BUTTON if answer.marked_for_review else MARK_BUTTON)
        self.prev_button.setEnabled(index > 0)
        self.next_button.setEnabled(index < total - 1)

        for nav_index, button in enumerate(self._navigator_buttons):
            button.setStyleSheet(
                Styles.get_navigator_cell_style(state.answers[nav_index].status, nav_index == index)
            )

    # --- Handlers ---

    def _handle_select(self, option_index: int) -> None:
        if self._session_id is not None:
            self._render(self.quiz_manager.select_option(self._session_id, option_index))

    def _handle_toggle_review(self) -> None:
        if self._session_id is not None:
            self._render(self.quiz_manager.toggle_review(self._session_id))

    def _handle_go_to(self, index: int) -> None:
        if self._session_id is not None:
            self._render(self.quiz_manager.go_to_question(self._session_id, index))

    def _handle_next(self) -> None:
        if self._session_id is not None:
            self._render(self.quiz_manager.next_question(self._session_id))

    def _handle_previous(self) -> None:
        if self._session_id is not None:
            self._render(self.quiz_manager.previous_question(self._session_id))

    def _handle_submit(self) -> None:
        if self._session_id is None:
            return
        view = self.quiz_manager.get_session(self._session_id)
        unanswered = sum(1 for answer in view.state.answers if answer.selected_option_index is None)
        if not confirm_submit(self, unanswered):
            return
        if self._session_id is not None:
            self._render(self.quiz_manager.submit_session(self._session_id))
