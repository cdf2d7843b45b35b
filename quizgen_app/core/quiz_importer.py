"""Utilities for importing quizzes from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    EXPLANATION: Why the correct option is right (optional, may span lines)

Lines starting with whitespace continue the current section, even when they
look like a marker, and one indent level is removed. A blank line followed by
an indented line is a paragraph break rather than the end of the block.

Example:

    Q: What is $2 + 2$?
    A: 3
    B: 4
    C: 5
    D: 22
    CORRECT: B
    EXPLANATION: Adding two and two gives four.

Imported files feed the same session flow as generated quizzes, so every
question must name its correct option.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from quizgen_app.constants.quiz_constants import CONTINUATION_INDENT, OPTION_LETTERS
from quizgen_app.core.models import Question


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path
    questions: list[Question]

    @property
    def topic(self) -> str:
        """Quiz topic taken from the file name."""
        return self.source_path.stem.replace("_", " ").strip() or "Imported quiz"


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_quiz_text(text)
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return ImportedQuiz(source_path=file_path, questions=questions)


def parse_quiz_text(text: str) -> list[Question]:
    return [
        _parse_block(block, question_id)
        for question_id, block in enumerate(_split_blocks(text), start=1)
    ]


def _is_continuation(raw_line: str) -> bool:
    return raw_line[:1] in (" ", "\t")


def _strip_indent(raw_line: str) -> str:
    if raw_line.startswith(CONTINUATION_INDENT):
        return raw_line[len(CONTINUATION_INDENT):]
    if raw_line.startswith("\t"):
        return raw_line[1:]
    return raw_line.lstrip()


def _split_blocks(text: str) -> list[list[str]]:
    """Group lines into question blocks.

    A blank line ends a block unless the next line is indented, in which
    case it is a paragraph break inside the current section.
    """
    blocks: list[list[str]] = []
    current_block: list[str] = []
    pending_blanks = 0
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if not stripped:
            if current_block:
                pending_blanks += 1
            continue
        continuation = bool(current_block) and _is_continuation(raw_line)
        if pending_blanks:
            if continuation:
                current_block.extend([""] * pending_blanks)
            else:
                blocks.append(current_block)
                current_block = []
            pending_blanks = 0
        if stripped == "---" and not continuation:
            if current_block:
                blocks.append(current_block)
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append(current_block)
    return blocks


def _parse_block(block: list[str], question_id: int) -> Question:
    question_lines: list[str] = []
    explanation_lines: list[str] = []
    options: dict[str, list[str]] = {}
    correct_letter: str | None = None
    current_section: str | None = None

    for raw_line in block:
        if not raw_line or _is_continuation(raw_line):
            content = _strip_indent(raw_line)
            if current_section == "Q":
                question_lines.append(content)
            elif current_section == "EXPLANATION":
                explanation_lines.append(content)
            elif current_section in OPTION_LETTERS:
                options[current_section].append(content)
            else:
                raise QuizImportError(
                    f"Encountered text outside of a known section: '{content.strip()}'."
                )
            continue

        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = [line[2:].strip()]
            current_section = letter
            continue

        # Unindented text still continues the open section in hand-written files.
        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section].append(line)
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")
    if len(options) != len(OPTION_LETTERS):
        raise QuizImportError("Each question must define exactly four options (A-D).")

    option_list = tuple("\n".join(options[letter]).strip() for letter in OPTION_LETTERS)
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("Each question must name its correct option (CORRECT: ...).")
    if correct_letter not in OPTION_LETTERS:
        raise QuizImportError("CORRECT must be one of A, B, C, or D.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return Question(
        id=question_id,
        text=question_text,
        options=option_list,
        correct_option_index=OPTION_LETTERS.index(correct_letter),
        explanation="\n".join(explanation_lines).strip(),
    )
