"""FastAPI server exposing quiz generation, quiz taking, saving and sharing."""

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import uvicorn

from quizgen_app.config import AppConfig
from quizgen_app.constants.quiz_constants import MAX_QUESTIONS, MIN_QUESTIONS
from quizgen_app.core.markdown_math_renderer import renderer
from quizgen_app.core.models import (
    AnswerRecord,
    Question,
    QuizAttempt,
    QuizSettings,
    ResultRecord,
    SavedQuiz,
)
from quizgen_app.core.quiz_generator import QuizGenerationError
from quizgen_app.core.quiz_manager import (
    QuizManager,
    SessionNotFoundError,
    SessionStateError,
    SessionView,
)
from quizgen_app.core.services.attempt_history import AttemptOutcome
from quizgen_app.core.services.quiz_repository import AttemptNotFoundError, QuizNotFoundError
from quizgen_app.core.services.quiz_session import QuizSessionError, build_quiz_settings
from quizgen_app.core.services.share_registry import ShareRegistry, ShareTokenNotFoundError
from quizgen_app.server.quiz_page import QUIZ_PAGE_HTML
from quizgen_app.utils.time_format import format_clock

logger = logging.getLogger(__name__)


class QuestionPayload(BaseModel):
    """Question in the generator's wire shape."""

    id: int
    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""


class SettingsPayload(BaseModel):
    topic: str
    difficulty: str = "medium"
    total_questions: int
    timer_minutes: int | None = None
    negative_marking: bool = False
    penalty: float = 0.0


class GeneratePayload(BaseModel):
    topic: str
    num_questions: int = Field(default=10, ge=MIN_QUESTIONS, le=MAX_QUESTIONS)
    difficulty: str = "medium"
    timer_minutes: int | None = None
    negative_marking: bool = False
    penalty: float = 0.0


class SaveQuizPayload(BaseModel):
    owner_id: str
    questions: list[QuestionPayload]
    settings: SettingsPayload


class StartSessionPayload(BaseModel):
    """Exactly one source: inline questions + settings, a saved quiz, or a share token."""

    questions: list[QuestionPayload] | None = None
    settings: SettingsPayload | None = None
    quiz_id: str | None = None
    share_token: str | None = None
    guest_name: str | None = None
    retake_attempt_id: str | None = None
    owner_id: str | None = None


class SelectPayload(BaseModel):
    option_index: int


class GoToPayload(BaseModel):
    index: int


class OwnerPayload(BaseModel):
    owner_id: str


@contextmanager
def _api_errors() -> Iterator[None]:
    """Translate domain exceptions into HTTP errors."""
    try:
        yield
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Quiz session not found.") from exc
    except QuizNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Quiz not found.") from exc
    except AttemptNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Quiz attempt not found.") from exc
    except ShareTokenNotFoundError as exc:
        raise HTTPException(status_code=404, detail="This quiz link may have been deleted.") from exc
    except QuizGenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (QuizSessionError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _to_question(payload: QuestionPayload) -> Question:
    return Question(
        id=payload.id,
        text=payload.question,
        options=tuple(payload.options),
        correct_option_index=payload.correct_answer,
        explanation=payload.explanation,
    )


def _to_settings(payload: SettingsPayload) -> QuizSettings:
    return build_quiz_settings(
        topic=payload.topic,
        difficulty=payload.difficulty,
        total_questions=payload.total_questions,
        timer_minutes=payload.timer_minutes,
        negative_marking_enabled=payload.negative_marking,
        penalty_per_wrong=payload.penalty,
    )


def _serialize_question(question: Question, reveal: bool) -> dict[str, object]:
    data: dict[str, object] = {
        "id": question.id,
        "question": question.text,
        "question_html": renderer.render_fragment(question.text),
        "options": list(question.options),
        "options_html": [renderer.render_inline(option) for option in question.options],
    }
    if reveal:
        data["correct_answer"] = question.correct_option_index
        data["explanation"] = question.explanation
        data["explanation_html"] = renderer.render_fragment(question.explanation)
    return data


def _serialize_settings(settings: QuizSettings) -> dict[str, object]:
    return {
        "topic": settings.topic,
        "difficulty": settings.difficulty.value,
        "total_questions": settings.total_questions,
        "timer_minutes": settings.timer_minutes,
        "negative_marking": settings.negative_marking_enabled,
        "penalty": settings.penalty_per_wrong,
    }


def _serialize_answer(answer: AnswerRecord) -> dict[str, object]:
    return {
        "question_id": answer.question_id,
        "selected_option": answer.selected_option_index,
        "marked_for_review": answer.marked_for_review,
        "status": answer.status,
    }


def _serialize_result(result: ResultRecord) -> dict[str, object]:
    return {
        "correct_answers": result.correct_count,
        "wrong_answers": result.wrong_count,
        "unanswered": result.unanswered_count,
        "total_questions": result.total_questions,
        "score": result.score,
        "percentage": round(result.percentage, 1),
        "time_taken_seconds": result.elapsed_seconds,
        "time_taken": format_clock(result.elapsed_seconds),
        "answers": [
            {
                "question_id": outcome.question_id,
                "selected_option": outcome.selected,
                "correct_answer": outcome.correct,
                "is_correct": outcome.is_correct,
            }
            for outcome in result.per_question
        ],
    }


def _serialize_session(view: SessionView) -> dict[str, object]:
    state = view.state
    return {
        "session_id": view.session_id,
        "settings": _serialize_settings(view.settings),
        "current_index": state.current_index,
        "remaining_seconds": state.remaining_seconds,
        "remaining": format_clock(state.remaining_seconds),
        "submitted": state.submitted,
        "questions": [_serialize_question(q, reveal=state.submitted) for q in state.questions],
        "answers": [_serialize_answer(a) for a in state.answers],
        "result": _serialize_result(view.result) if view.result is not None else None,
        "quiz_id": view.quiz_id,
        "share_token": view.share_token,
        "guest_name": view.guest_name,
        "attempt_id": view.attempt_id,
    }


def _serialize_quiz(quiz: SavedQuiz, include_questions: bool = True) -> dict[str, object]:
    data: dict[str, object] = {
        "id": quiz.id,
        "owner_id": quiz.owner_id,
        "created_at": quiz.created_at.isoformat(),
        "settings": _serialize_settings(quiz.settings),
    }
    if include_questions:
        data["questions"] = [_serialize_question(q, reveal=True) for q in quiz.questions]
    return data


def _serialize_attempt(attempt: QuizAttempt) -> dict[str, object]:
    return {
        "id": attempt.id,
        "quiz_id": attempt.quiz_id,
        "topic": attempt.topic,
        "difficulty": attempt.difficulty.value,
        "user_id": attempt.user_id,
        "guest_name": attempt.guest_name,
        "shared_quiz_token": attempt.share_token,
        "completed_at": attempt.completed_at.isoformat(),
        **_serialize_result(attempt.result),
    }


def _handle_rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Window length is the longest a client can have to wait.
    retry_after = exc.limit.limit.get_expiry()
    return JSONResponse(
        {"detail": f"Generation limit reached ({exc.detail}). Try again later."},
        status_code=429,
        headers={"Retry-After": str(retry_after)},
    )


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def create_api_app(quiz_manager: QuizManager, config: AppConfig | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    config = config or AppConfig()
    app = FastAPI(title="QuizGen API", version="0.1.0")
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)

    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _handle_rate_limit_exceeded)

    @app.get("/", response_class=HTMLResponse)
    def serve_quiz_page() -> str:
        return QUIZ_PAGE_HTML

    @app.get("/quiz/shared/{token}", response_class=HTMLResponse)
    def serve_shared_quiz_page(token: str) -> str:
        return QUIZ_PAGE_HTML

    # --- Quizzes ---

    @app.post("/api/quizzes/generate")
    @limiter.limit(config.generation_rate_limit)
    def generate_quiz(
        request: Request,
        payload: GeneratePayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            settings = build_quiz_settings(
                topic=payload.topic,
                difficulty=payload.difficulty,
                total_questions=payload.num_questions,
                timer_minutes=payload.timer_minutes,
                negative_marking_enabled=payload.negative_marking,
                penalty_per_wrong=payload.penalty,
            )
            questions = manager.generate_quiz(settings, client_address=None)
        return {
            "questions": [_serialize_question(q, reveal=True) for q in questions],
            "settings": _serialize_settings(settings),
        }

    @app.post("/api/quizzes", status_code=201)
    def save_quiz(
        payload: SaveQuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            settings = _to_settings(payload.settings)
            questions = [_to_question(q) for q in payload.questions]
            quiz = manager.save_quiz(payload.owner_id, questions, settings)
        return _serialize_quiz(quiz)

    @app.get("/api/quizzes")
    def list_quizzes(
        owner_id: str,
        limit: int | None = 5,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        quizzes = manager.list_quizzes(owner_id, limit)
        return [_serialize_quiz(quiz, include_questions=False) for quiz in quizzes]

    @app.delete("/api/quizzes/{quiz_id}", status_code=204)
    def delete_quiz(
        quiz_id: str,
        owner_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> None:
        with _api_errors():
            manager.delete_quiz(quiz_id, owner_id)

    @app.post("/api/quizzes/{quiz_id}/share")
    def share_quiz(
        quiz_id: str,
        payload: OwnerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            shared = manager.share_quiz(quiz_id, payload.owner_id)
        return {
            "quiz_id": shared.quiz_id,
            "share_token": shared.share_token,
            "share_url": ShareRegistry.share_url(config.public_url, shared.share_token),
            "view_count": shared.view_count,
            "attempt_count": shared.attempt_count,
        }

    @app.get("/api/shared/{token}")
    def get_shared_quiz(
        token: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            shared, quiz = manager.open_shared_quiz(token)
        return {
            "share_token": shared.share_token,
            "view_count": shared.view_count,
            "attempt_count": shared.attempt_count,
            "settings": _serialize_settings(quiz.settings),
        }

    # --- Sessions ---

    @app.post("/api/sessions", status_code=201)
    def start_session(
        payload: StartSessionPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            if payload.share_token:
                view = manager.start_shared_session(payload.share_token, payload.guest_name or "")
            elif payload.quiz_id:
                view = manager.start_saved_quiz_session(payload.quiz_id)
            elif payload.retake_attempt_id and payload.owner_id:
                view = manager.start_retake_session(payload.retake_attempt_id, payload.owner_id)
            elif payload.questions is not None and payload.settings is not None:
                view = manager.start_session(
                    [_to_question(q) for q in payload.questions],
                    _to_settings(payload.settings),
                )
            else:
                raise ValueError("Provide questions and settings, a quiz id, or a share token.")
        return _serialize_session(view)

    @app.get("/api/sessions/{session_id}")
    def get_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.get_session(session_id))

    @app.post("/api/sessions/{session_id}/select")
    def select_option(
        session_id: str,
        payload: SelectPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.select_option(session_id, payload.option_index))

    @app.post("/api/sessions/{session_id}/review")
    def toggle_review(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.toggle_review(session_id))

    @app.post("/api/sessions/{session_id}/goto")
    def go_to_question(
        session_id: str,
        payload: GoToPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.go_to_question(session_id, payload.index))

    @app.post("/api/sessions/{session_id}/next")
    def next_question(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.next_question(session_id))

    @app.post("/api/sessions/{session_id}/previous")
    def previous_question(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.previous_question(session_id))

    @app.post("/api/sessions/{session_id}/submit")
    def submit_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            return _serialize_session(manager.submit_session(session_id))

    @app.get("/api/sessions/{session_id}/result")
    def get_result(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            view = manager.get_session(session_id)
        if view.result is None:
            raise HTTPException(status_code=409, detail="The quiz has not been submitted yet.")
        return _serialize_result(view.result)

    @app.post("/api/sessions/{session_id}/save", status_code=201)
    def save_attempt(
        session_id: str,
        payload: OwnerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        with _api_errors():
            attempt = manager.save_attempt(session_id, payload.owner_id)
        return _serialize_attempt(attempt)

    @app.delete("/api/sessions/{session_id}", status_code=204)
    def close_session(
        session_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> None:
        with _api_errors():
            manager.close_session(session_id)

    # --- History ---

    @app.get("/api/attempts")
    def list_attempts(
        owner_id: str,
        outcome: AttemptOutcome = AttemptOutcome.ALL,
        search: str | None = None,
        limit: int | None = None,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> list[dict[str, object]]:
        attempts = manager.list_attempts(owner_id, outcome, search, limit)
        return [_serialize_attempt(attempt) for attempt in attempts]

    @app.delete("/api/attempts/{attempt_id}", status_code=204)
    def delete_attempt(
        attempt_id: str,
        owner_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> None:
        with _api_errors():
            manager.delete_attempt(attempt_id, owner_id)

    @app.get("/api/dashboard")
    def get_dashboard(
        owner_id: str,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        summary = manager.get_dashboard(owner_id)
        return {
            "total_attempts": summary.total_attempts,
            "total_correct": summary.total_correct,
            "total_questions": summary.total_questions,
            "average_percentage": summary.average_percentage,
            "total_time_minutes": summary.total_time_minutes,
            "favorite_topic": summary.favorite_topic,
        }

    return app


def start_api_server(quiz_manager: QuizManager, config: AppConfig) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_manager, config)
    uvicorn_config = uvicorn.Config(app=app, host=config.host, port=config.port, log_level="info")
    server = uvicorn.Server(uvicorn_config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on %s:%d", config.host, config.port)
    return thread
