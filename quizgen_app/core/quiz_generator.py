"""AI question generation through an OpenAI-compatible chat completions API.

The model is asked for a JSON object of the shape::

    {"questions": [{"id": 1, "question": "...", "options": ["..", "..", "..", ".."],
                    "correct_answer": 0, "explanation": "..."}]}

The reply is validated with pydantic and converted into ``Question`` records
numbered 1..N in the order received.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from quizgen_app.config import AppConfig
from quizgen_app.constants.quiz_constants import OPTION_COUNT
from quizgen_app.core.models import Difficulty, Question, QuizSettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert quiz generator. Create high-quality multiple-choice questions "
    "with clear, unambiguous answers. Each question should have exactly 4 options "
    "labeled A, B, C, D, with only one correct answer. Provide detailed explanations "
    "for why the correct answer is right and why other options are wrong."
)

_DIFFICULTY_GUIDANCE = {
    Difficulty.EASY: "Focus on basic concepts and definitions",
    Difficulty.MEDIUM: "Include application and understanding questions",
    Difficulty.HARD: "Include complex scenarios and analysis questions",
    Difficulty.MIX: "Mix of easy, medium, and hard questions",
}


class QuizGenerationError(RuntimeError):
    """Raised when the language model cannot produce a usable question set."""


class QuestionSetGenerator(Protocol):
    def generate(self, settings: QuizSettings) -> list[Question]: ...


class GeneratedQuestion(BaseModel):
    id: int | None = None
    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer: int = Field(ge=0, lt=OPTION_COUNT)
    explanation: str = ""


class GeneratedQuiz(BaseModel):
    questions: list[GeneratedQuestion]


def build_user_prompt(settings: QuizSettings) -> str:
    guidance = _DIFFICULTY_GUIDANCE[settings.difficulty]
    level = settings.difficulty.value
    return f"""Generate {settings.total_questions} multiple-choice questions about "{settings.topic}" at {level} difficulty level.

Requirements:
- Each question must have exactly 4 options (A, B, C, D)
- Only one option should be correct
- Provide detailed explanation for each question
- Questions should be clear and unambiguous
- For {level} difficulty: {guidance}

Return ONLY a valid JSON object in this exact format:
{{
  "questions": [
    {{
      "id": 1,
      "question": "Question text here?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": 0,
      "explanation": "Detailed explanation of why the answer is correct and why others are wrong"
    }}
  ]
}}"""


def parse_generated_questions(content: str, expected_count: int) -> list[Question]:
    """Validate the model's JSON reply and convert it into questions."""
    try:
        payload = GeneratedQuiz.model_validate(json.loads(content))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise QuizGenerationError("Invalid quiz data structure") from exc

    if len(payload.questions) != expected_count:
        raise QuizGenerationError(
            f"Expected {expected_count} questions but the model returned {len(payload.questions)}."
        )

    return [
        Question(
            id=position,
            text=item.question.strip(),
            options=tuple(option.strip() for option in item.options),
            correct_option_index=item.correct_answer,
            explanation=item.explanation.strip(),
        )
        for position, item in enumerate(payload.questions, start=1)
    ]


class LLMQuizGenerator:
    """Generates question sets with a chat completions endpoint."""

    def __init__(self, config: AppConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client or httpx.Client(timeout=config.llm_timeout_seconds)

    def generate(self, settings: QuizSettings) -> list[Question]:
        logger.info(
            "Generating quiz: topic=%r questions=%d difficulty=%s",
            settings.topic,
            settings.total_questions,
            settings.difficulty.value,
        )
        content = self._complete(build_user_prompt(settings))
        questions = parse_generated_questions(content, settings.total_questions)
        logger.info("Quiz generated successfully: %d questions", len(questions))
        return questions

    def close(self) -> None:
        self._client.close()

    def _complete(self, user_prompt: str) -> str:
        url = f"{self._config.llm_base_url.rstrip('/')}/chat/completions"
        headers = {"Content-Type": "application/json"}
        if self._config.llm_api_key:
            headers["Authorization"] = f"Bearer {self._config.llm_api_key}"
        payload = {
            "model": self._config.llm_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._config.llm_temperature,
            "response_format": {"type": "json_object"},
        }

        try:
            response = self._client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("LLM request failed: %s", exc)
            raise QuizGenerationError("Failed to reach the quiz generation service.") from exc

        if response.status_code >= 400:
            logger.error("LLM API error: %s %s", response.status_code, response.text[:500])
            raise QuizGenerationError(f"LLM API error: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise QuizGenerationError("Invalid response from the quiz generation service.") from exc
        if not content:
            raise QuizGenerationError("The quiz generation service returned an empty reply.")
        logger.debug("Raw AI response: %s", content)
        return content
