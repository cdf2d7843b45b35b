from __future__ import annotations

from fastapi.testclient import TestClient

from quizgen_app.config import AppConfig
from quizgen_app.core.quiz_manager import QuizManager
from quizgen_app.core.services.rate_limiter import GenerationRateLimiter
from quizgen_app.server.api_server import create_api_app

from conftest import FakeGenerator, ManualTickScheduler

SETTINGS = {
    "topic": "Arithmetic",
    "difficulty": "medium",
    "total_questions": 2,
    "timer_minutes": 1,
    "negative_marking": True,
    "penalty": -0.5,
}

QUESTIONS = [
    {"id": 1, "question": "1 + 1?", "options": ["1", "2", "3", "4"], "correct_answer": 1, "explanation": "Two."},
    {"id": 2, "question": "2 + 2?", "options": ["4", "5", "6", "7"], "correct_answer": 0, "explanation": "Four."},
]


def _start_inline(client: TestClient) -> dict:
    response = client.post("/api/sessions", json={"questions": QUESTIONS, "settings": SETTINGS})
    assert response.status_code == 201
    return response.json()


def test_quiz_page_is_served(client):
    assert "QuizGen" in client.get("/").text
    assert client.get("/quiz/shared/abc").status_code == 200


def test_generate_returns_questions_and_settings(client):
    response = client.post(
        "/api/quizzes/generate",
        json={"topic": "Cells", "num_questions": 3, "difficulty": "easy"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert len(payload["questions"]) == 3
    assert payload["settings"]["timer_minutes"] == 3
    assert payload["settings"]["penalty"] == 0.0
    assert "correct_answer" in payload["questions"][0]


def test_generate_validates_input(client):
    assert client.post("/api/quizzes/generate", json={"topic": " ", "num_questions": 3}).status_code == 422
    assert client.post("/api/quizzes/generate", json={"topic": "x", "num_questions": 51}).status_code == 422
    assert client.post(
        "/api/quizzes/generate", json={"topic": "x", "difficulty": "impossible"}
    ).status_code == 422


def test_generate_rate_limit_maps_to_429():
    manager = QuizManager(generator=FakeGenerator(), scheduler_factory=ManualTickScheduler)
    client = TestClient(create_api_app(manager, AppConfig(generation_rate_limit="1/hour")))
    body = {"topic": "Cells", "num_questions": 1}

    assert client.post("/api/quizzes/generate", json=body).status_code == 200
    response = client.post("/api/quizzes/generate", json=body)
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "3600"
    assert client.post("/api/sessions", json={}).status_code == 422


def test_generate_route_is_not_limited_twice():
    fake = FakeGenerator()
    manager = QuizManager(
        generator=fake,
        rate_limiter=GenerationRateLimiter("1/hour"),
        scheduler_factory=ManualTickScheduler,
    )
    client = TestClient(create_api_app(manager, AppConfig(generation_rate_limit="2/hour")))
    body = {"topic": "Cells", "num_questions": 1}

    assert client.post("/api/quizzes/generate", json=body).status_code == 200
    assert client.post("/api/quizzes/generate", json=body).status_code == 200
    assert len(fake.requests) == 2


def test_session_hides_answers_until_submitted(client):
    session = _start_inline(client)

    assert session["submitted"] is False
    assert session["remaining_seconds"] == 60
    assert session["remaining"] == "1:00"
    assert "correct_answer" not in session["questions"][0]
    assert "<p>" in session["questions"][0]["question_html"]
    assert [a["status"] for a in session["answers"]] == ["unanswered", "unanswered"]


def test_full_session_flow_with_negative_marking(client):
    session_id = _start_inline(client)["session_id"]
    base = f"/api/sessions/{session_id}"

    client.post(f"{base}/select", json={"option_index": 1})
    state = client.post(f"{base}/review").json()
    assert state["answers"][0]["status"] == "review"
    state = client.post(f"{base}/next").json()
    assert state["current_index"] == 1
    client.post(f"{base}/select", json={"option_index": 3})
    state = client.post(f"{base}/previous").json()
    assert state["current_index"] == 0

    state = client.post(f"{base}/submit").json()

    assert state["submitted"] is True
    assert state["questions"][0]["correct_answer"] == 1
    result = client.get(f"{base}/result").json()
    assert result["correct_answers"] == 1
    assert result["wrong_answers"] == 1
    assert result["unanswered"] == 0
    assert result["score"] == 0.5
    assert result["percentage"] == 50.0
    assert [a["is_correct"] for a in result["answers"]] == [True, False]


def test_mutations_after_submit_are_ignored(client):
    session_id = _start_inline(client)["session_id"]
    base = f"/api/sessions/{session_id}"
    client.post(f"{base}/submit")

    state = client.post(f"{base}/select", json={"option_index": 2}).json()

    assert state["answers"][0]["selected_option"] is None
    assert client.post(f"{base}/submit").json()["result"] == state["result"]


def test_out_of_range_requests_return_422(client):
    session_id = _start_inline(client)["session_id"]
    base = f"/api/sessions/{session_id}"

    assert client.post(f"{base}/select", json={"option_index": 4}).status_code == 422
    assert client.post(f"{base}/goto", json={"index": 9}).status_code == 422
    assert client.get(base).json()["answers"][0]["selected_option"] is None


def test_unknown_session_returns_404(client):
    assert client.get("/api/sessions/missing").status_code == 404
    assert client.post("/api/sessions/missing/next").status_code == 404


def test_result_before_submit_is_conflict(client):
    session_id = _start_inline(client)["session_id"]
    assert client.get(f"/api/sessions/{session_id}/result").status_code == 409
    assert client.post(
        f"/api/sessions/{session_id}/save", json={"owner_id": "alice"}
    ).status_code == 409


def test_invalid_session_payloads_return_422(client):
    assert client.post("/api/sessions", json={}).status_code == 422
    bad = [dict(QUESTIONS[0], options=["a", "b"]), QUESTIONS[1]]
    assert client.post("/api/sessions", json={"questions": bad, "settings": SETTINGS}).status_code == 422
    assert client.post(
        "/api/sessions", json={"questions": QUESTIONS[:1], "settings": SETTINGS}
    ).status_code == 422


def test_close_session(client):
    session_id = _start_inline(client)["session_id"]
    assert client.delete(f"/api/sessions/{session_id}").status_code == 204
    assert client.get(f"/api/sessions/{session_id}").status_code == 404


def test_save_share_and_take_as_guest(client):
    session_id = _start_inline(client)["session_id"]
    client.post(f"/api/sessions/{session_id}/submit")
    attempt = client.post(f"/api/sessions/{session_id}/save", json={"owner_id": "alice"}).json()
    quiz_id = attempt["quiz_id"]

    shared = client.post(f"/api/quizzes/{quiz_id}/share", json={"owner_id": "alice"}).json()
    token = shared["share_token"]
    assert shared["share_url"] == f"http://quiz.test/quiz/shared/{token}"

    landing = client.get(f"/api/shared/{token}").json()
    assert landing["settings"]["topic"] == "Arithmetic"
    assert landing["view_count"] == 1

    assert client.post("/api/sessions", json={"share_token": token, "guest_name": ""}).status_code == 422
    guest = client.post("/api/sessions", json={"share_token": token, "guest_name": "Sam"}).json()
    finished = client.post(f"/api/sessions/{guest['session_id']}/submit").json()
    assert finished["guest_name"] == "Sam"
    assert finished["attempt_id"] is not None

    assert client.get(f"/api/shared/{token}").json()["attempt_count"] == 1
    assert client.post(f"/api/quizzes/{quiz_id}/share", json={"owner_id": "bob"}).status_code == 404


def test_unknown_share_token_returns_404(client):
    assert client.get("/api/shared/nope").status_code == 404
    assert client.post("/api/sessions", json={"share_token": "nope", "guest_name": "Sam"}).status_code == 404


def test_saved_quizzes_history_and_dashboard(client):
    saved = client.post(
        "/api/quizzes", json={"owner_id": "alice", "questions": QUESTIONS, "settings": SETTINGS}
    )
    assert saved.status_code == 201
    quiz_id = saved.json()["id"]

    listed = client.get("/api/quizzes", params={"owner_id": "alice"}).json()
    assert [q["id"] for q in listed] == [quiz_id]

    session = client.post("/api/sessions", json={"quiz_id": quiz_id}).json()
    client.post(f"/api/sessions/{session['session_id']}/select", json={"option_index": 1})
    client.post(f"/api/sessions/{session['session_id']}/submit")
    attempt = client.post(
        f"/api/sessions/{session['session_id']}/save", json={"owner_id": "alice"}
    ).json()
    assert attempt["quiz_id"] == quiz_id

    passed = client.get("/api/attempts", params={"owner_id": "alice", "outcome": "passed"}).json()
    assert [a["id"] for a in passed] == [attempt["id"]]
    assert client.get("/api/attempts", params={"owner_id": "alice", "search": "bio"}).json() == []

    dashboard = client.get("/api/dashboard", params={"owner_id": "alice"}).json()
    assert dashboard["total_attempts"] == 1
    assert dashboard["average_percentage"] == 50.0
    assert dashboard["favorite_topic"] == "Arithmetic"

    retake = client.post(
        "/api/sessions", json={"retake_attempt_id": attempt["id"], "owner_id": "alice"}
    )
    assert retake.status_code == 201

    assert client.delete(f"/api/attempts/{attempt['id']}", params={"owner_id": "alice"}).status_code == 204
    assert client.delete(f"/api/quizzes/{quiz_id}", params={"owner_id": "bob"}).status_code == 404
    assert client.delete(f"/api/quizzes/{quiz_id}", params={"owner_id": "alice"}).status_code == 204
    assert client.get("/api/quizzes", params={"owner_id": "alice"}).json() == []
