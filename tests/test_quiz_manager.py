from __future__ import annotations

import pytest

from conftest import ManualTickScheduler, make_questions, make_settings
from quizgen_app.core.quiz_generator import QuizGenerationError
from quizgen_app.core.quiz_manager import QuizManager, SessionNotFoundError, SessionStateError
from quizgen_app.core.services.quiz_repository import AttemptNotFoundError, QuizNotFoundError
from quizgen_app.core.services.quiz_session import InvalidQuizInputError, OutOfRangeError
from quizgen_app.core.services.rate_limiter import GenerationRateLimiter, RateLimitExceededError
from quizgen_app.core.services.share_registry import ShareTokenNotFoundError


def _start(manager: QuizManager, count: int = 3, **kwargs):
    scheduler = ManualTickScheduler()
    view = manager.start_session(make_questions(count), make_settings(count), scheduler=scheduler, **kwargs)
    return view, scheduler


def test_generate_quiz_uses_generator(manager, fake_generator):
    questions = manager.generate_quiz(make_settings(4))
    assert len(questions) == 4
    assert fake_generator.requests[0].total_questions == 4


def test_generate_quiz_without_generator_fails():
    with pytest.raises(QuizGenerationError):
        QuizManager().generate_quiz(make_settings(3))


def test_generate_quiz_applies_rate_limit(fake_generator):
    manager = QuizManager(generator=fake_generator, rate_limiter=GenerationRateLimiter("1/hour"))
    manager.generate_quiz(make_settings(3), client_address="1.2.3.4")
    with pytest.raises(RateLimitExceededError):
        manager.generate_quiz(make_settings(3), client_address="1.2.3.4")
    manager.generate_quiz(make_settings(3), client_address="5.6.7.8")
    assert len(fake_generator.requests) == 2


def test_generate_quiz_without_client_address_skips_limiter(fake_generator):
    manager = QuizManager(generator=fake_generator, rate_limiter=GenerationRateLimiter("1/hour"))
    manager.generate_quiz(make_settings(3))
    manager.generate_quiz(make_settings(3), client_address=None)
    with pytest.raises(RateLimitExceededError):
        manager.generate_quiz(make_settings(3))


def test_session_operations_return_fresh_views(manager):
    view, _ = _start(manager)

    view = manager.select_option(view.session_id, 2)
    assert view.state.answers[0].selected_option_index == 2

    view = manager.toggle_review(view.session_id)
    assert view.state.answers[0].marked_for_review

    view = manager.next_question(view.session_id)
    assert view.state.current_index == 1
    view = manager.previous_question(view.session_id)
    assert view.state.current_index == 0
    view = manager.go_to_question(view.session_id, 2)
    assert view.state.current_index == 2
    assert manager.get_session(view.session_id).state == view.state


def test_out_of_range_goto_propagates(manager):
    view, _ = _start(manager)
    with pytest.raises(OutOfRangeError):
        manager.go_to_question(view.session_id, 10)


def test_ticks_run_through_the_manager_lock_and_auto_submit(manager):
    view, scheduler = _start(manager)
    scheduler.fire(60)

    view = manager.get_session(view.session_id)
    assert view.state.submitted
    assert view.result is not None
    assert view.result.elapsed_seconds == 60


def test_tick_after_close_is_dropped(manager):
    view, scheduler = _start(manager)
    manager.close_session(view.session_id)

    assert scheduler.cancelled
    scheduler.fire(60)
    assert manager.active_session_count() == 0


def test_close_unknown_session_raises(manager):
    with pytest.raises(SessionNotFoundError):
        manager.close_session("nope")
    with pytest.raises(SessionNotFoundError):
        manager.get_session("nope")


def test_default_scheduler_factory_is_used(manager):
    view = manager.start_session(make_questions(2), make_settings(2))
    assert not manager.get_session(view.session_id).state.submitted
    manager.close_session(view.session_id)


def test_save_attempt_requires_submission(manager):
    view, _ = _start(manager)
    with pytest.raises(SessionStateError):
        manager.save_attempt(view.session_id, "alice")


def test_save_attempt_stores_quiz_and_attempt_once(manager):
    view, _ = _start(manager)
    manager.select_option(view.session_id, 0)
    manager.submit_session(view.session_id)

    attempt = manager.save_attempt(view.session_id, "alice")

    assert manager.get_quiz(attempt.quiz_id).owner_id == "alice"
    assert manager.list_attempts("alice") == [attempt]
    assert attempt.result.correct_count == 1
    assert manager.get_session(view.session_id).attempt_id == attempt.id
    with pytest.raises(SessionStateError):
        manager.save_attempt(view.session_id, "alice")


def test_saved_quiz_session_reuses_owned_quiz(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    view = manager.start_saved_quiz_session(quiz.id, scheduler=ManualTickScheduler())
    manager.submit_session(view.session_id)

    attempt = manager.save_attempt(view.session_id, "alice")

    assert attempt.quiz_id == quiz.id
    assert len(manager.list_quizzes("alice")) == 1


def test_retake_starts_new_session_from_saved_quiz(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3, timer_minutes=5))
    view = manager.start_saved_quiz_session(quiz.id, scheduler=ManualTickScheduler())
    manager.submit_session(view.session_id)
    attempt = manager.save_attempt(view.session_id, "alice")

    retake = manager.start_retake_session(attempt.id, "alice", scheduler=ManualTickScheduler())

    assert retake.session_id != view.session_id
    assert retake.quiz_id == quiz.id
    assert retake.state.remaining_seconds == 300
    assert not retake.state.submitted
    with pytest.raises(QuizNotFoundError):
        manager.start_retake_session(attempt.id, "bob")


def test_shared_session_records_guest_attempt_on_submit(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    shared = manager.share_quiz(quiz.id, "alice")

    view = manager.start_shared_session(shared.share_token, "  Sam  ", scheduler=ManualTickScheduler())
    assert view.guest_name == "Sam"
    view = manager.submit_session(view.session_id)

    assert view.attempt_id is not None
    assert shared.attempt_count == 1
    assert shared.view_count == 0


def test_shared_session_timeout_also_records_attempt(manager):
    quiz = manager.save_quiz("alice", make_questions(2), make_settings(2, timer_minutes=1))
    shared = manager.share_quiz(quiz.id, "alice")
    scheduler = ManualTickScheduler()
    view = manager.start_shared_session(shared.share_token, "Sam", scheduler=scheduler)

    scheduler.fire(60)

    assert manager.get_session(view.session_id).attempt_id is not None
    assert shared.attempt_count == 1


def test_shared_session_requires_guest_name(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    shared = manager.share_quiz(quiz.id, "alice")
    with pytest.raises(InvalidQuizInputError):
        manager.start_shared_session(shared.share_token, "   ")


def test_open_shared_quiz_counts_views(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    shared = manager.share_quiz(quiz.id, "alice")

    opened, opened_quiz = manager.open_shared_quiz(shared.share_token)

    assert opened.view_count == 1
    assert opened_quiz.id == quiz.id


def test_share_quiz_checks_owner(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    with pytest.raises(QuizNotFoundError):
        manager.share_quiz(quiz.id, "bob")


def test_delete_quiz_revokes_share(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    shared = manager.share_quiz(quiz.id, "alice")

    manager.delete_quiz(quiz.id, "alice")

    with pytest.raises(ShareTokenNotFoundError):
        manager.open_shared_quiz(shared.share_token)


def test_guest_submit_after_quiz_deleted_is_not_recorded(manager):
    quiz = manager.save_quiz("alice", make_questions(3), make_settings(3))
    shared = manager.share_quiz(quiz.id, "alice")
    view = manager.start_shared_session(shared.share_token, "Sam", scheduler=ManualTickScheduler())
    manager.delete_quiz(quiz.id, "alice")

    view = manager.submit_session(view.session_id)

    assert view.state.submitted
    assert view.attempt_id is None


def test_history_filters_and_dashboard(manager):
    for correct in (3, 1):
        view, _ = _start(manager)
        for index in range(correct):
            manager.go_to_question(view.session_id, index)
            manager.select_option(view.session_id, make_questions(3)[index].correct_option_index)
        manager.submit_session(view.session_id)
        manager.save_attempt(view.session_id, "alice")

    assert len(manager.list_attempts("alice", outcome="passed")) == 1
    assert len(manager.list_attempts("alice", outcome="failed")) == 1
    assert len(manager.list_attempts("alice", limit=1)) == 1
    assert manager.list_attempts("alice", search="geology") == []

    summary = manager.get_dashboard("alice")
    assert summary.total_attempts == 2
    assert summary.total_correct == 4
    assert summary.favorite_topic == "Arithmetic"


def test_delete_attempt_checks_owner(manager):
    view, _ = _start(manager)
    manager.submit_session(view.session_id)
    attempt = manager.save_attempt(view.session_id, "alice")

    with pytest.raises(AttemptNotFoundError):
        manager.delete_attempt(attempt.id, "bob")
    manager.delete_attempt(attempt.id, "alice")
    assert manager.list_attempts("alice") == []


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_finished_sessions_are_discarded_after_retention(fake_generator):
    clock = FakeMonotonic()
    manager = QuizManager(
        generator=fake_generator,
        scheduler_factory=ManualTickScheduler,
        session_retention_seconds=600,
        clock=clock,
    )
    for _ in range(100):
        view, _ = _start(manager)
        manager.submit_session(view.session_id)
    timed_out, scheduler = _start(manager)
    scheduler.fire(60)
    running, _ = _start(manager)

    clock.now += 599
    manager.start_session(make_questions(2), make_settings(2), scheduler=ManualTickScheduler())
    assert manager.active_session_count() == 103

    clock.now += 1
    manager.start_session(make_questions(2), make_settings(2), scheduler=ManualTickScheduler())

    assert manager.active_session_count() == 3
    assert not manager.get_session(running.session_id).state.submitted
    with pytest.raises(SessionNotFoundError):
        manager.get_session(timed_out.session_id)


def test_finished_session_stays_readable_within_retention(manager):
    view, _ = _start(manager)
    manager.submit_session(view.session_id)
    _start(manager)

    assert manager.get_session(view.session_id).result is not None
    manager.save_attempt(view.session_id, "alice")
