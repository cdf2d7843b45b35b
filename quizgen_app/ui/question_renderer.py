"""HTML rendering of questions and reviews for the embedded web views."""

from __future__ import annotations

from quizgen_app.constants.quiz_constants import OPTION_LETTERS
from quizgen_app.core.markdown_math_renderer import renderer
from quizgen_app.core.models import Question, ResultRecord


def render_question(question: Question, number: int, total: int, font_size: int = 14) -> str:
    """Render the question text (Markdown + LaTeX) with its position in the quiz."""
    body = (
        f"<p><em>Question {number} of {total}</em></p>"
        + renderer.render_fragment(question.text.strip() or "(No question text)")
    )
    return renderer.wrap_with_mathjax(body, font_size=font_size)


def render_review(questions: tuple[Question, ...], result: ResultRecord, font_size: int = 14) -> str:
    """Render every question with the chosen answer, the correct answer and the explanation."""
    sections: list[str] = []
    for number, (question, outcome) in enumerate(zip(questions, result.per_question), start=1):
        if outcome.selected is None:
            chosen = "Not answered"
        else:
            chosen = f"{OPTION_LETTERS[outcome.selected]}. {renderer.render_inline(question.options[outcome.selected])}"
        correct_letter = OPTION_LETTERS[question.correct_option_index]
        correct_text = renderer.render_inline(question.options[question.correct_option_index])
        css = "correct" if outcome.is_correct else "wrong"
        sections.append(
            f"<section><h3>{number}.</h3>"
            f"{renderer.render_fragment(question.text)}"
            f"<p class=\"{css}\">Your answer: {chosen}</p>"
            f"<p class=\"correct\">Correct answer: {correct_letter}. {correct_text}</p>"
            f"{renderer.render_fragment(question.explanation) if question.explanation else ''}"
            "<hr/></section>"
        )
    return renderer.wrap_with_mathjax("".join(sections), title="Quiz review", font_size=font_size)
