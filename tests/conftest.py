from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quizgen_app.config import AppConfig
from quizgen_app.core.models import Difficulty, Question, QuizSettings
from quizgen_app.core.quiz_manager import QuizManager
from quizgen_app.core.services.quiz_session import QuizSessionController, build_quiz_settings
from quizgen_app.core.services.tick_scheduler import TickCallback
from quizgen_app.server.api_server import create_api_app


class ManualTickScheduler:
    """Scheduler whose ticks are fired explicitly by the test."""

    def __init__(self) -> None:
        self.callback: TickCallback | None = None
        self.cancelled = False
        self.start_count = 0

    def start(self, callback: TickCallback) -> None:
        self.callback = callback
        self.start_count += 1

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def is_running(self) -> bool:
        return self.callback is not None and not self.cancelled

    def fire(self, times: int = 1) -> None:
        # Keeps firing after cancel so tests can model a late tick.
        assert self.callback is not None, "scheduler was never started"
        for _ in range(times):
            self.callback()


class FakeGenerator:
    """Returns canned questions instead of calling a language model."""

    def __init__(self) -> None:
        self.requests: list[QuizSettings] = []

    def generate(self, settings: QuizSettings) -> list[Question]:
        self.requests.append(settings)
        return make_questions(settings.total_questions)


def make_questions(count: int = 3) -> list[Question]:
    return [
        Question(
            id=number,
            text=f"Question {number}: what is ${number} + 0$?",
            options=(str(number), str(number + 1), str(number + 2), str(number + 3)),
            correct_option_index=(number - 1) % 4,
            explanation=f"Adding zero to {number} leaves it unchanged.",
        )
        for number in range(1, count + 1)
    ]


def make_settings(
    count: int = 3,
    timer_minutes: int = 1,
    negative_marking: bool = False,
    penalty: float = 0.0,
    topic: str = "Arithmetic",
) -> QuizSettings:
    return build_quiz_settings(
        topic=topic,
        difficulty=Difficulty.MEDIUM,
        total_questions=count,
        timer_minutes=timer_minutes,
        negative_marking_enabled=negative_marking,
        penalty_per_wrong=penalty,
    )


@pytest.fixture
def questions() -> list[Question]:
    return make_questions(3)


@pytest.fixture
def settings() -> QuizSettings:
    return make_settings(3)


@pytest.fixture
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def session(questions, settings, scheduler) -> QuizSessionController:
    return QuizSessionController.start(questions, settings, scheduler=scheduler)


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def manager(fake_generator) -> QuizManager:
    return QuizManager(generator=fake_generator, scheduler_factory=ManualTickScheduler)


@pytest.fixture
def client(manager) -> TestClient:
    app = create_api_app(manager, AppConfig(public_url="http://quiz.test"))
    return TestClient(app)
