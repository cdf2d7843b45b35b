from __future__ import annotations

import json

import httpx
import pytest

from conftest import make_settings
from quizgen_app.config import AppConfig
from quizgen_app.core.models import Difficulty
from quizgen_app.core.quiz_generator import (
    LLMQuizGenerator,
    QuizGenerationError,
    build_user_prompt,
    parse_generated_questions,
)
from quizgen_app.core.services.quiz_session import build_quiz_settings


def _reply(count: int) -> dict:
    return {
        "questions": [
            {
                "id": 100 + n,
                "question": f" Question {n}? ",
                "options": ["w", "x", "y", "z"],
                "correct_answer": n % 4,
                "explanation": "Because.",
            }
            for n in range(count)
        ]
    }


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _generator(handler, **config_overrides) -> LLMQuizGenerator:
    config = AppConfig(llm_base_url="https://llm.test/v1", llm_api_key="secret", **config_overrides)
    return LLMQuizGenerator(config, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_parse_renumbers_and_strips_questions():
    questions = parse_generated_questions(json.dumps(_reply(3)), expected_count=3)
    assert [q.id for q in questions] == [1, 2, 3]
    assert questions[0].text == "Question 0?"
    assert questions[2].correct_option_index == 2
    assert questions[1].options == ("w", "x", "y", "z")


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"items": []}),
        json.dumps({"questions": [{"question": "Q", "options": ["a", "b"], "correct_answer": 0}]}),
        json.dumps({"questions": [{"question": "Q", "options": ["a", "b", "c", "d"], "correct_answer": 4}]}),
    ],
)
def test_parse_rejects_malformed_replies(content):
    with pytest.raises(QuizGenerationError):
        parse_generated_questions(content, expected_count=1)


def test_parse_rejects_wrong_question_count():
    with pytest.raises(QuizGenerationError):
        parse_generated_questions(json.dumps(_reply(2)), expected_count=3)


def test_user_prompt_mentions_topic_count_and_difficulty_guidance():
    prompt = build_user_prompt(build_quiz_settings("Photosynthesis", Difficulty.EASY, 7))
    assert "7 multiple-choice questions" in prompt
    assert '"Photosynthesis"' in prompt
    assert "basic concepts and definitions" in prompt


def test_generate_posts_chat_completion_request():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion(json.dumps(_reply(3))))

    generator = _generator(handler, llm_model="test-model")
    questions = generator.generate(make_settings(3))

    assert len(questions) == 3
    assert captured["url"] == "https://llm.test/v1/chat/completions"
    assert captured["auth"] == "Bearer secret"
    assert captured["body"]["model"] == "test-model"
    assert captured["body"]["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in captured["body"]["messages"]] == ["system", "user"]


def test_generate_maps_http_error_status():
    generator = _generator(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(QuizGenerationError, match="500"):
        generator.generate(make_settings(3))


def test_generate_maps_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(QuizGenerationError):
        _generator(handler).generate(make_settings(3))


def test_generate_rejects_reply_without_choices():
    generator = _generator(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(QuizGenerationError):
        generator.generate(make_settings(3))
