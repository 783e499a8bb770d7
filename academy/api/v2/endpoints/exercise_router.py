import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.models.user.user_model import User
from academy.schemas.exercise.submission_schema import (
    DraftEdit,
    DraftSave,
    ExerciseDetail,
    ExerciseTemplateRead,
    SubmissionRead,
    SubmitRequest,
    SubmitResult,
)
from academy.services.exercise_template_service import (
    ExerciseResponseEditor,
    ExerciseTemplateError,
    ItemLimitError,
    ReadOnlyResponseError,
    UnknownFieldError,
    validate_response,
)
from academy.services.submission_service import (
    ExerciseNotFoundError,
    SubmissionAlreadySubmittedError,
    SubmissionService,
    SubmissionValidationError,
    get_exercise_instance,
)
from academy.services.tasks import run_submission_evaluation

router = APIRouter()
logger = logging.getLogger(__name__)


def _instance_or_404(db: Session, exercise_id: int):
    try:
        return get_exercise_instance(db, exercise_id)
    except ExerciseNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="exercise_not_found")


@router.get("/{exercise_id}", response_model=ExerciseDetail, summary="Exercise with its form and latest submission")
def get_exercise(
    exercise_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    instance = _instance_or_404(db, exercise_id)
    submission = SubmissionService(db, current_user).latest_for_instance(exercise_id)
    response = (submission.user_response if submission else None) or {}
    read_only = bool(submission and submission.submitted_at)

    editor = ExerciseResponseEditor(instance.template.template_config, response, read_only=read_only)
    return ExerciseDetail(
        id=instance.id,
        lesson_id=instance.lesson_id,
        prompt=instance.prompt,
        estimated_minutes=instance.estimated_minutes,
        template=ExerciseTemplateRead.model_validate(instance.template),
        submission=SubmissionRead.model_validate(submission) if submission else None,
        read_only=read_only,
        form=editor.render(),
        missing_fields=validate_response(instance.template.template_config, response),
    )


@router.put("/{exercise_id}/draft", response_model=SubmissionRead, summary="Save the whole draft")
def save_draft(
    exercise_id: int,
    payload: DraftSave,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _instance_or_404(db, exercise_id)
    try:
        draft = SubmissionService(db, current_user).save_draft(exercise_id, payload.user_response)
    except SubmissionAlreadySubmittedError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="already_submitted")
    return SubmissionRead.model_validate(draft)


@router.patch("/{exercise_id}/draft", response_model=SubmissionRead, summary="Apply one edit to the draft")
def edit_draft(
    exercise_id: int,
    payload: DraftEdit,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _instance_or_404(db, exercise_id)
    try:
        draft = SubmissionService(db, current_user).apply_edit(exercise_id, payload.model_dump())
    except (ReadOnlyResponseError, SubmissionAlreadySubmittedError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="already_submitted")
    except UnknownFieldError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown_field: {exc.args[0]}")
    except (ItemLimitError, IndexError, ExerciseTemplateError, TypeError) as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return SubmissionRead.model_validate(draft)


@router.post("/{exercise_id}/submit", response_model=SubmitResult, summary="Submit for AI evaluation")
def submit_exercise(
    exercise_id: int,
    payload: SubmitRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _instance_or_404(db, exercise_id)
    try:
        submission = SubmissionService(db, current_user).submit(exercise_id, payload.user_response)
    except SubmissionAlreadySubmittedError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="already_submitted")
    except SubmissionValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "missing_fields": exc.missing_fields},
        )

    background_tasks.add_task(run_submission_evaluation, submission.id)
    return SubmitResult(
        submission=SubmissionRead.model_validate(submission),
        evaluation_scheduled=True,
        message="Exercise submitted successfully! AI evaluation in progress...",
    )
