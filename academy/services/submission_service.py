import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session, joinedload

from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.submission_model import Submission, SubmissionStatus
from academy.models.user.achievement_model import AchievementType
from academy.models.user.user_model import User
from academy.services.exercise_template_service import ExerciseResponseEditor, validate_response
from academy.services.progress_service import ProgressService

logger = logging.getLogger(__name__)


class ExerciseNotFoundError(LookupError):
    pass


class SubmissionNotFoundError(LookupError):
    pass


class SubmissionAlreadySubmittedError(Exception):
    def __init__(self, submission: Submission):
        super().__init__(f"Exercise {submission.exercise_instance_id} was already submitted.")
        self.submission = submission


class SubmissionValidationError(ValueError):
    def __init__(self, missing_fields: List[str]):
        super().__init__("Please complete all required fields before submitting")
        self.missing_fields = missing_fields


def get_exercise_instance(db: Session, instance_id: int) -> ExerciseInstance:
    instance = (
        db.query(ExerciseInstance)
        .options(joinedload(ExerciseInstance.template), joinedload(ExerciseInstance.lesson))
        .filter(ExerciseInstance.id == instance_id)
        .first()
    )
    if instance is None or instance.template is None:
        raise ExerciseNotFoundError("Exercise not found")
    return instance


class SubmissionService:
    """Drafts and submissions of one user. A user has at most one draft per exercise."""

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    def _query(self, instance_id: int):
        return self.db.query(Submission).filter(
            Submission.user_id == self.user.id,
            Submission.exercise_instance_id == instance_id,
        )

    def latest_for_instance(self, instance_id: int) -> Optional[Submission]:
        return self._query(instance_id).order_by(Submission.created_at.desc(), Submission.id.desc()).first()

    def _submitted(self, instance_id: int) -> Optional[Submission]:
        return self._query(instance_id).filter(Submission.submitted_at.isnot(None)).first()

    def _draft(self, instance_id: int) -> Optional[Submission]:
        return self._query(instance_id).filter(Submission.submitted_at.is_(None)).first()

    def save_draft(self, instance_id: int, response: Mapping[str, Any]) -> Submission:
        get_exercise_instance(self.db, instance_id)
        submitted = self._submitted(instance_id)
        if submitted is not None:
            raise SubmissionAlreadySubmittedError(submitted)

        draft = self._draft(instance_id)
        if draft is None:
            draft = Submission(
                user_id=self.user.id,
                exercise_instance_id=instance_id,
                status=SubmissionStatus.DRAFT,
            )
            self.db.add(draft)
        draft.user_response = dict(response or {})
        self.db.commit()
        self.db.refresh(draft)
        return draft

    def apply_edit(self, instance_id: int, operation: Mapping[str, Any]) -> Submission:
        """Run one editor operation against the stored draft (an empty one if none exists)."""
        instance = get_exercise_instance(self.db, instance_id)
        submitted = self._submitted(instance_id)
        draft = self._draft(instance_id)
        current: Dict[str, Any] = (draft.user_response if draft else None) or {}

        # A submitted exercise is read-only: the editor raises ReadOnlyResponseError.
        editor = ExerciseResponseEditor(instance.template.template_config, current, read_only=submitted is not None)
        updated = editor.apply(operation)
        return self.save_draft(instance_id, updated)

    def submit(self, instance_id: int, response: Optional[Mapping[str, Any]] = None) -> Submission:
        instance = get_exercise_instance(self.db, instance_id)
        submitted = self._submitted(instance_id)
        if submitted is not None:
            raise SubmissionAlreadySubmittedError(submitted)

        draft = self._draft(instance_id)
        if response is None:
            response = (draft.user_response if draft else None) or {}

        missing = validate_response(instance.template.template_config, response)
        if missing:
            raise SubmissionValidationError(missing)

        submission = draft
        if submission is None:
            submission = Submission(user_id=self.user.id, exercise_instance_id=instance_id)
            self.db.add(submission)
        submission.user_response = dict(response)
        submission.status = SubmissionStatus.SUBMITTED
        submission.submitted_at = datetime.now(timezone.utc)
        self.user.exercises_completed = (self.user.exercises_completed or 0) + 1
        self.db.commit()
        self.db.refresh(submission)
        logger.info("User %s submitted exercise %s (submission %s)", self.user.id, instance_id, submission.id)

        if self.user.exercises_completed == 1:
            ProgressService(self.db, self.user).award_achievement("first-exercise", AchievementType.MILESTONE)
        return submission
