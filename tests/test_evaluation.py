from __future__ import annotations

import pytest

from academy.core import ai_service
from academy.models.exercise.submission_model import Submission, SubmissionStatus
from academy.services import evaluation_service, tasks
from academy.services.evaluation_service import (
    EvaluationService,
    fallback_evaluation,
    parse_evaluation,
    weighted_overall_score,
)
from academy.services.submission_service import SubmissionNotFoundError, SubmissionService
from tests.utils import RUBRIC, create_course, create_exercise, create_user

CRITERIA = RUBRIC["criteria"]
COMPLETE_RESPONSE = {"problem": "Freelancers chase late invoices", "evidence": ["12 of 15 interviewees"]}


@pytest.fixture()
def submission(db_session):
    user = create_user(db_session)
    course = create_course(db_session, competencies=["SC1", "SC3"])
    exercise = create_exercise(db_session, course.lessons[0])
    return SubmissionService(db_session, user).submit(exercise.id, COMPLETE_RESPONSE)


def test_weighted_overall_score():
    assert weighted_overall_score({"Clarity": 80, "Evidence": 90, "Depth": 70}, CRITERIA) == 81


def test_weighted_score_without_weights_uses_plain_mean():
    criteria = [{"name": "A"}, {"name": "B"}]
    assert weighted_overall_score({"A": 70, "B": 75}, criteria) == 73
    assert weighted_overall_score({}, criteria) == 0


def test_fallback_evaluation_scores_every_criterion():
    result = fallback_evaluation(CRITERIA)

    assert set(result.criteria_scores) == {"Clarity", "Evidence", "Depth"}
    assert all(70 <= score <= 89 for score in result.criteria_scores.values())
    assert 70 <= result.overall_score <= 89
    assert len(result.next_steps) == 3


def test_parse_evaluation_computes_missing_overall_and_clamps():
    result = parse_evaluation({"criteriaScores": {"Clarity": 80, "Evidence": 90, "Depth": 70}, "feedback": "ok"}, CRITERIA)
    assert result.overall_score == 81

    result = parse_evaluation({"overallScore": 104.6, "criteriaScores": {"Clarity": -3}}, CRITERIA)
    assert result.overall_score == 100
    assert result.criteria_scores == {"Clarity": 0}


def test_parse_evaluation_rejects_malformed_scores():
    with pytest.raises(ValueError):
        parse_evaluation({"criteriaScores": ["not", "an", "object"]}, CRITERIA)


def test_evaluation_is_stored_on_the_submission(db_session, submission, monkeypatch):
    captured = {}

    def _fake_generate_json(prompt, *, temperature=None, max_output_tokens=None):
        captured.update(prompt=prompt, temperature=temperature, max_output_tokens=max_output_tokens)
        return {
            "overallScore": 81,
            "criteriaScores": {"Clarity": 80, "Evidence": 90, "Depth": 70},
            "feedback": "Solid evidence.",
            "strengths": ["Specific segment"],
            "improvements": ["Quantify the pain"],
            "nextSteps": ["Run 5 more interviews"],
        }

    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(ai_service, "generate_json", _fake_generate_json)

    result = EvaluationService(db_session).evaluate_submission(submission.id)
    stored = db_session.get(Submission, submission.id)

    assert result.overall_score == 81
    assert captured["temperature"] == 0.3
    assert captured["max_output_tokens"] == 2000
    assert "12 of 15 interviewees" in captured["prompt"]
    assert stored.status == SubmissionStatus.EVALUATED
    assert stored.score == 81
    assert stored.evaluated_at is not None
    assert stored.scores == {"overall": 81, "criteria": {"Clarity": 80, "Evidence": 90, "Depth": 70}}
    assert stored.ai_evaluation["nextSteps"] == ["Run 5 more interviews"]
    assert stored.ai_evaluation["passingScore"] == 70
    assert stored.ai_evaluation["passed"] is True


def test_evaluation_updates_course_competencies(db_session, submission, monkeypatch):
    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(
        ai_service,
        "generate_json",
        lambda *a, **k: {"overallScore": 92, "criteriaScores": {"Clarity": 92}},
    )

    EvaluationService(db_session).evaluate_submission(submission.id)
    user = db_session.get(Submission, submission.id).user

    assert user.competency_scores == {"SC1": 46, "SC3": 46}


def test_model_failure_uses_fallback(db_session, submission, monkeypatch):
    def _raise(*args, **kwargs):
        raise ValueError("Invalid AI response format")

    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(ai_service, "generate_json", _raise)
    monkeypatch.setattr(evaluation_service.random, "randint", lambda low, high: 75)

    result = EvaluationService(db_session).evaluate_submission(submission.id)

    assert result.overall_score == 75
    assert result.feedback == evaluation_service.FALLBACK_FEEDBACK
    assert db_session.get(Submission, submission.id).status == SubmissionStatus.EVALUATED


def test_offline_evaluation_uses_fallback(db_session, submission):
    result = EvaluationService(db_session).evaluate_submission(submission.id)
    assert 70 <= result.overall_score <= 89


def test_unknown_submission_raises(db_session):
    with pytest.raises(SubmissionNotFoundError):
        EvaluationService(db_session).evaluate_submission(12345)


def test_background_task_uses_its_own_session(db_session, session_factory, submission, monkeypatch):
    monkeypatch.setattr(tasks.db_session, "SessionLocal", session_factory)

    tasks.run_submission_evaluation(submission.id)

    db_session.expire_all()
    assert db_session.get(Submission, submission.id).status == SubmissionStatus.EVALUATED


def test_background_task_logs_missing_submission(session_factory, monkeypatch, caplog):
    monkeypatch.setattr(tasks.db_session, "SessionLocal", session_factory)

    with caplog.at_level("ERROR", logger="academy.services.tasks"):
        tasks.run_submission_evaluation(999)

    record = caplog.records[-1]
    assert record.getMessage() == "Background evaluation failed for submission 999: Submission not found"
    assert record.args[0] == 999


@pytest.mark.parametrize("bad_score", [None, [80], {"value": 80}])
def test_parse_evaluation_rejects_non_numeric_scores(bad_score):
    with pytest.raises(ValueError):
        parse_evaluation({"criteriaScores": {"Clarity": bad_score}, "overallScore": 80}, CRITERIA)


def test_parse_evaluation_rejects_non_numeric_overall_score():
    with pytest.raises(ValueError):
        parse_evaluation({"criteriaScores": {"Clarity": 80}, "overallScore": [80]}, CRITERIA)


def test_non_numeric_model_scores_use_fallback(db_session, submission, monkeypatch):
    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(
        ai_service,
        "generate_json",
        lambda *a, **k: {"criteriaScores": {"Clarity": None}, "overallScore": 80},
    )
    monkeypatch.setattr(evaluation_service.random, "randint", lambda low, high: 72)

    result = EvaluationService(db_session).evaluate_submission(submission.id)
    stored = db_session.get(Submission, submission.id)

    assert result.overall_score == 72
    assert result.feedback == evaluation_service.FALLBACK_FEEDBACK
    assert stored.status == SubmissionStatus.EVALUATED


def test_null_passing_score_defaults_to_seventy(db_session, monkeypatch):
    user = create_user(db_session)
    course = create_course(db_session)
    exercise = create_exercise(db_session, course.lessons[0], rubric={"criteria": CRITERIA, "passingScore": None})
    submission = SubmissionService(db_session, user).submit(exercise.id, COMPLETE_RESPONSE)
    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(
        ai_service,
        "generate_json",
        lambda *a, **k: {"overallScore": 69, "criteriaScores": {"Clarity": 69}},
    )

    EvaluationService(db_session).evaluate_submission(submission.id)
    stored = db_session.get(Submission, submission.id)

    assert stored.ai_evaluation["passingScore"] == 70
    assert stored.ai_evaluation["passed"] is False
