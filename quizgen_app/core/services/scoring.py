"""Scoring of submitted attempts, with optional negative marking."""

from __future__ import annotations

from collections.abc import Sequence

from quizgen_app.core.models import (
    AnswerRecord,
    Question,
    QuestionOutcome,
    QuizSettings,
    ResultRecord,
)


def score_attempt(
    questions: Sequence[Question],
    answers: Sequence[AnswerRecord],
    settings: QuizSettings,
    elapsed_seconds: int,
) -> ResultRecord:
    """Compute counts and the final score for a finished answer set.

    Each correct answer is worth one point. With negative marking enabled every
    wrong answer adds ``penalty_per_wrong`` (a non-positive number); unanswered
    questions never cost anything. The score is neither clamped nor rounded.
    """
    if len(questions) != len(answers):
        raise ValueError("Answers must be parallel to the question sequence.")

    correct_count = 0
    wrong_count = 0
    unanswered_count = 0
    outcomes: list[QuestionOutcome] = []

    for question, answer in zip(questions, answers):
        selected = answer.selected_option_index
        is_correct = selected is not None and selected == question.correct_option_index
        if selected is None:
            unanswered_count += 1
        elif is_correct:
            correct_count += 1
        else:
            wrong_count += 1
        outcomes.append(
            QuestionOutcome(
                question_id=question.id,
                selected=selected,
                correct=question.correct_option_index,
                is_correct=is_correct,
            )
        )

    score = float(correct_count)
    if settings.negative_marking_enabled:
        score = correct_count + wrong_count * settings.penalty_per_wrong

    return ResultRecord(
        correct_count=correct_count,
        wrong_count=wrong_count,
        unanswered_count=unanswered_count,
        score=score,
        elapsed_seconds=elapsed_seconds,
        per_question=tuple(outcomes),
    )
