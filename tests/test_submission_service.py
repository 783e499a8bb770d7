from __future__ import annotations

import pytest

from academy.crud import achievement_crud
from academy.models.exercise.submission_model import Submission, SubmissionStatus
from academy.services.exercise_template_service import ReadOnlyResponseError
from academy.services.submission_service import (
    ExerciseNotFoundError,
    SubmissionAlreadySubmittedError,
    SubmissionService,
    SubmissionValidationError,
)
from tests.utils import create_course, create_exercise, create_user

COMPLETE_RESPONSE = {"problem": "Freelancers chase late invoices", "evidence": ["12 of 15 interviewees"]}


@pytest.fixture()
def exercise(db_session):
    course = create_course(db_session)
    return create_exercise(db_session, course.lessons[0])


@pytest.fixture()
def service(db_session):
    return SubmissionService(db_session, create_user(db_session))


def test_save_draft_keeps_a_single_draft(db_session, service, exercise):
    first = service.save_draft(exercise.id, {"problem": "v1"})
    second = service.save_draft(exercise.id, {"problem": "v2"})

    assert first.id == second.id
    assert second.user_response == {"problem": "v2"}
    assert second.status == SubmissionStatus.DRAFT
    assert second.submitted_at is None
    assert db_session.query(Submission).count() == 1


def test_unknown_exercise_raises(service):
    with pytest.raises(ExerciseNotFoundError):
        service.save_draft(999, {})


def test_apply_edit_starts_from_empty_draft(service, exercise):
    draft = service.apply_edit(exercise.id, {"op": "update_field", "field_id": "problem", "value": "Churn"})
    assert draft.user_response == {"problem": "Churn"}

    draft = service.apply_edit(exercise.id, {"op": "add_list_item", "field_id": "evidence"})
    assert draft.user_response["evidence"] == [""]


def test_submit_rejects_incomplete_response(service, exercise):
    service.save_draft(exercise.id, {"problem": "Churn"})

    with pytest.raises(SubmissionValidationError) as exc:
        service.submit(exercise.id)
    assert exc.value.missing_fields == ["evidence"]


def test_submit_promotes_the_draft(db_session, service, exercise):
    draft = service.save_draft(exercise.id, COMPLETE_RESPONSE)
    submission = service.submit(exercise.id)

    assert submission.id == draft.id
    assert submission.status == SubmissionStatus.SUBMITTED
    assert submission.submitted_at is not None
    assert service.user.exercises_completed == 1
    assert achievement_crud.get_user_achievement(db_session, service.user.id, "first-exercise") is not None


def test_submit_with_explicit_response_and_no_draft(service, exercise):
    submission = service.submit(exercise.id, COMPLETE_RESPONSE)
    assert submission.user_response == COMPLETE_RESPONSE


def test_submitted_exercise_is_read_only(service, exercise):
    service.submit(exercise.id, COMPLETE_RESPONSE)

    with pytest.raises(SubmissionAlreadySubmittedError):
        service.submit(exercise.id, COMPLETE_RESPONSE)
    with pytest.raises(SubmissionAlreadySubmittedError):
        service.save_draft(exercise.id, {"problem": "changed"})
    with pytest.raises(ReadOnlyResponseError):
        service.apply_edit(exercise.id, {"op": "update_field", "field_id": "problem", "value": "changed"})
    assert service.user.exercises_completed == 1
