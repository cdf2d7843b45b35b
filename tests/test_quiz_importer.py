from __future__ import annotations

import pytest

from conftest import make_questions
from quizgen_app.core.models import Question
from quizgen_app.core.quiz_exporter import save_quiz_to_file, serialize_questions
from quizgen_app.core.quiz_importer import (
    ImportedQuiz,
    QuizImportError,
    load_quiz_from_file,
    parse_quiz_text,
)

SAMPLE = """Q: What is $2 + 2$?
A: 3
B: 4
C: 5
D: 22
CORRECT: B
EXPLANATION: Adding two and two gives four.
The other options are off by one or concatenated.

---

Q: Which planet is largest?
with a second line
A: Mars
B: Earth
C: Jupiter
D: Venus
CORRECT: c
"""


def test_parse_reads_blocks_and_explanations():
    questions = parse_quiz_text(SAMPLE)

    assert [q.id for q in questions] == [1, 2]
    assert questions[0].correct_option_index == 1
    assert questions[0].explanation.splitlines() == [
        "Adding two and two gives four.",
        "The other options are off by one or concatenated.",
    ]
    assert questions[1].text == "Which planet is largest?\nwith a second line"
    assert questions[1].correct_option_index == 2
    assert questions[1].explanation == ""


@pytest.mark.parametrize(
    "text",
    [
        "Q: Missing options\nA: one\nB: two\nCORRECT: A",
        "Q: Missing answer\nA: 1\nB: 2\nC: 3\nD: 4",
        "Q: Bad answer\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: E",
        "stray text\nQ: x\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: A",
    ],
)
def test_parse_rejects_malformed_blocks(text):
    with pytest.raises(QuizImportError):
        parse_quiz_text(text)


def test_load_quiz_from_file_takes_topic_from_file_name(tmp_path):
    path = tmp_path / "solar_system.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    imported = load_quiz_from_file(path)

    assert len(imported.questions) == 2
    assert imported.topic == "solar system"
    assert ImportedQuiz(source_path=tmp_path / "___.txt", questions=[]).topic == "Imported quiz"


def test_empty_file_is_rejected(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("\n\n", encoding="utf-8")
    with pytest.raises(QuizImportError):
        load_quiz_from_file(path)


def test_exported_file_imports_back(tmp_path):
    questions = make_questions(3)
    path = tmp_path / "nested" / "quiz.txt"

    save_quiz_to_file(path, questions)

    assert parse_quiz_text(path.read_text(encoding="utf-8")) == questions


def test_multiline_sections_survive_export_and_import(tmp_path):
    tricky = Question(
        id=1,
        text="Which sum is right?\n\nQ: this line is part of the question",
        options=("w", "x\nCORRECT: D", "y", "z"),
        correct_option_index=2,
        explanation="It is four.\n\nAddition is commutative.\nWhy not the rest:\nB: x is wrong\n---\n    indented code",
    )
    questions = [tricky, *make_questions(2)[1:]]
    path = tmp_path / "tricky.txt"

    save_quiz_to_file(path, questions)
    loaded = parse_quiz_text(path.read_text(encoding="utf-8"))

    assert loaded == questions


def test_indented_lines_continue_sections_in_hand_written_files():
    text = (
        "Q: First line\n"
        "    A: still the question\n"
        "A: 1\nB: 2\nC: 3\nD: 4\n"
        "CORRECT: A\n"
        "EXPLANATION: One.\n"
        "\n"
        "    Second paragraph.\n"
        "\n"
        "Q: Next\nA: 1\nB: 2\nC: 3\nD: 4\nCORRECT: B\n"
    )

    first, second = parse_quiz_text(text)

    assert first.text == "First line\nA: still the question"
    assert first.options == ("1", "2", "3", "4")
    assert first.explanation == "One.\n\nSecond paragraph."
    assert second.correct_option_index == 1


def test_serialize_writes_correct_and_explanation_lines():
    text = serialize_questions(make_questions(1))
    assert "CORRECT: A" in text
    assert "EXPLANATION: Adding zero to 1 leaves it unchanged." in text


def test_export_rejects_empty_quiz(tmp_path):
    with pytest.raises(ValueError):
        save_quiz_to_file(tmp_path / "quiz.txt", [])
