"""Qt main window switching between quiz generation, quiz taking and results."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path
from threading import Thread

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from quizgen_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from quizgen_app.constants.ui_constants import (
    EXPORT_DIALOG_TITLE,
    EXPORT_FILE_FILTER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    MODE_BUTTON_GENERATE,
    MODE_BUTTON_IMPORT,
    MODE_BUTTON_SAVE_FILE,
    NO_QUIZ_LOADED_MESSAGE,
    WINDOW_TITLE,
)
from quizgen_app.core.models import Question, QuizSettings
from quizgen_app.core.quiz_exporter import save_quiz_to_file
from quizgen_app.core.quiz_generator import QuizGenerationError
from quizgen_app.core.quiz_importer import QuizImportError, load_quiz_from_file
from quizgen_app.core.quiz_manager import QuizManager, SessionNotFoundError, SessionView
from quizgen_app.core.services.quiz_session import InvalidQuizInputError
from quizgen_app.core.services.rate_limiter import RateLimitExceededError
from quizgen_app.styling.styles import Styles
from quizgen_app.ui.components.generator_panel import GeneratorPanel
from quizgen_app.ui.components.results_panel import ResultsPanel
from quizgen_app.ui.components.session_panel import SessionPanel
from quizgen_app.ui.dialog_helpers import confirm_abandon_quiz, show_error, show_info, show_warning
from quizgen_app.ui.qt_tick_scheduler import QtTickScheduler

logger = logging.getLogger(__name__)


class WindowMode(Enum):
    """High-level UI mode of the main window."""

    GENERATE = auto()
    SESSION = auto()
    RESULTS = auto()


class _GenerationSignals(QObject):
    """Delivers generation results from the worker thread to the GUI thread."""

    finished = Signal(object, object)
    failed = Signal(str)


class QuizMainWindow(QMainWindow):
    """Main Qt window orchestrating the three application modes."""

    def __init__(self, quiz_manager: QuizManager, browser_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)

        self.quiz_manager = quiz_manager
        self.browser_url = browser_url

        self._mode = WindowMode.GENERATE
        self._questions: list[Question] = []
        self._settings: QuizSettings | None = None
        self._session_id: str | None = None
        self._last_export_path: Path | None = None

        self._generation_signals = _GenerationSignals(self)
        self._generation_signals.finished.connect(self._handle_generation_finished)
        self._generation_signals.failed.connect(self._handle_generation_failed)

        self._build_ui()
        self.setStyleSheet(Styles.get_main_window_style())
        if self.browser_url:
            self.statusBar().showMessage(f"Browser quiz available at {self.browser_url}")

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_mode_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.generator_panel = GeneratorPanel(on_generate=self._start_generation, parent=self)
        self.session_panel = SessionPanel(
            self.quiz_manager,
            on_submitted=self._handle_session_submitted,
            parent=self,
        )
        self.results_panel = ResultsPanel(
            on_retake=self._handle_retake,
            on_new_quiz=self._handle_new_quiz,
            parent=self,
        )
        self.mode_stack.addWidget(self.generator_panel)
        self.mode_stack.addWidget(self.session_panel)
        self.mode_stack.addWidget(self.results_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(WindowMode.GENERATE)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.new_quiz_button = QPushButton(MODE_BUTTON_GENERATE, self)
        self.new_quiz_button.clicked.connect(self._handle_new_quiz)
        button_row.addWidget(self.new_quiz_button)

        self.import_button = QPushButton(MODE_BUTTON_IMPORT, self)
        self.import_button.clicked.connect(self._handle_import_quiz)
        button_row.addWidget(self.import_button)

        self.save_quiz_button = QPushButton(MODE_BUTTON_SAVE_FILE, self)
        self.save_quiz_button.clicked.connect(self._handle_save_quiz_to_file)
        button_row.addWidget(self.save_quiz_button)

        button_row.addStretch()

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    def _set_mode(self, mode: WindowMode) -> None:
        self._mode = mode
        index_map = {
            WindowMode.GENERATE: 0,
            WindowMode.SESSION: 1,
            WindowMode.RESULTS: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])

    # --- Generation ---

    def _start_generation(self, settings: QuizSettings) -> None:
        self.generator_panel.set_busy(True)
        self.generator_panel.set_status_message("Generating questions, this can take a moment...")
        Thread(target=self._run_generation, args=(settings,), name="QuizGeneration", daemon=True).start()

    def _run_generation(self, settings: QuizSettings) -> None:
        try:
            questions = self.quiz_manager.generate_quiz(settings)
        except (QuizGenerationError, RateLimitExceededError) as exc:
            logger.error("Quiz generation failed: %s", exc)
            self._generation_signals.failed.emit(str(exc))
            return
        self._generation_signals.finished.emit(questions, settings)

    def _handle_generation_finished(self, questions: list[Question], settings: QuizSettings) -> None:
        self.generator_panel.set_busy(False)
        self.generator_panel.set_status_message("")
        self._begin_quiz(questions, settings)

    def _handle_generation_failed(self, message: str) -> None:
        self.generator_panel.set_busy(False)
        self.generator_panel.set_status_message(message)
        show_error(self, "Generation failed", message)

    # --- Sessions ---

    def _begin_quiz(self, questions: list[Question], settings: QuizSettings) -> bool:
        self._close_current_session()
        try:
            view = self.quiz_manager.start_session(
                questions,
                settings,
                scheduler=QtTickScheduler(parent=self),
            )
        except InvalidQuizInputError as exc:
            show_error(self, "Quiz rejected", str(exc))
            return False
        self._session_id = view.session_id
        self._questions = list(questions)
        self._settings = settings
        self.session_panel.attach(view.session_id)
        self._set_mode(WindowMode.SESSION)
        return True

    def _handle_session_submitted(self, view: SessionView) -> None:
        self.results_panel.show_result(view)
        self._set_mode(WindowMode.RESULTS)

    def _handle_retake(self) -> None:
        if self._settings is None:
            return
        self._begin_quiz(self._questions, self._settings)

    def _handle_new_quiz(self) -> None:
        if self._mode == WindowMode.SESSION and not confirm_abandon_quiz(self):
            return
        self._close_current_session()
        self._set_mode(WindowMode.GENERATE)

    def _close_current_session(self) -> None:
        self.session_panel.detach()
        if self._session_id is None:
            return
        try:
            self.quiz_manager.close_session(self._session_id)
        except SessionNotFoundError:
            logger.debug("Session %s was already discarded", self._session_id)
        self._session_id = None

    # --- Files ---

    def _handle_import_quiz(self) -> None:
        if self._mode == WindowMode.SESSION and not confirm_abandon_quiz(self):
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            imported = load_quiz_from_file(Path(file_path))
            settings = self.generator_panel.build_settings(
                topic=imported.topic,
                total_questions=len(imported.questions),
            )
        except (OSError, QuizImportError, InvalidQuizInputError) as exc:
            show_error(self, "Import failed", str(exc))
            return

        if self._begin_quiz(imported.questions, settings):
            logger.info("Imported %d questions from %s", len(imported.questions), file_path)

    def _handle_save_quiz_to_file(self) -> None:
        if not self._questions:
            show_warning(self, "No quiz", NO_QUIZ_LOADED_MESSAGE)
            return

        default_path = self._last_export_path or (Path.cwd() / "quiz_export.txt")
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            EXPORT_DIALOG_TITLE,
            str(default_path),
            EXPORT_FILE_FILTER,
        )
        if not file_path:
            return

        try:
            save_quiz_to_file(Path(file_path), self._questions)
        except (OSError, ValueError) as exc:
            show_error(self, "Export failed", str(exc))
            return

        self._last_export_path = Path(file_path)
        show_info(self, "Quiz saved", f"Quiz exported to {file_path}.")

    # --- About / help ---

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._close_current_session()
        super().closeEvent(event)
