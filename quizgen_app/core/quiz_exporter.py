"""Utilities for exporting quizzes to the plain-text format used for imports."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from quizgen_app.constants.quiz_constants import CONTINUATION_INDENT, OPTION_LETTERS
from quizgen_app.core.models import Question


def save_quiz_to_file(file_path: Path, questions: Sequence[Question]) -> None:
    """Persist the provided questions to disk in the text import format."""

    if not questions:
        raise ValueError("Cannot export an empty quiz.")

    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(serialize_questions(questions), encoding="utf-8")


def serialize_questions(questions: Sequence[Question]) -> str:
    blocks = [_serialize_question(question) for question in questions]
    return "\n\n---\n\n".join(blocks) + "\n"


def _section(marker: str, text: str) -> list[str]:
    # Indented continuation lines can never be mistaken for a marker.
    first, *rest = text.strip().splitlines() or [""]
    lines = [f"{marker}: {first}"]
    lines.extend(f"{CONTINUATION_INDENT}{line}" if line.strip() else "" for line in rest)
    return lines


def _serialize_question(question: Question) -> str:
    lines = _section("Q", question.text)
    for letter, option_text in zip(OPTION_LETTERS, question.options):
        lines.extend(_section(letter, option_text))
    lines.append(f"CORRECT: {OPTION_LETTERS[question.correct_option_index]}")
    if question.explanation:
        lines.extend(_section("EXPLANATION", question.explanation))
    return "\n".join(lines)
