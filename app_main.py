"""Application entry point for QuizGen."""

from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from quizgen_app.config import load_config
from quizgen_app.core.quiz_generator import LLMQuizGenerator
from quizgen_app.core.quiz_manager import QuizManager
from quizgen_app.core.services.rate_limiter import GenerationRateLimiter
from quizgen_app.server.api_server import start_api_server
from quizgen_app.ui.quiz_main_window import QuizMainWindow
from quizgen_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting QuizGen...")

    config = load_config()
    if not config.llm_api_key:
        logger.warning("OPENAI_API_KEY is not set; quiz generation requests may be rejected")

    generator = LLMQuizGenerator(config)
    quiz_manager = QuizManager(
        generator=generator,
        rate_limiter=GenerationRateLimiter(config.generation_rate_limit),
    )
    start_api_server(quiz_manager=quiz_manager, config=config)
    logger.info("Browser quiz available at %s", config.public_url)

    app = QApplication(sys.argv)
    window = QuizMainWindow(quiz_manager=quiz_manager, browser_url=config.public_url)
    window.show()
    exit_code = app.exec()
    generator.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
