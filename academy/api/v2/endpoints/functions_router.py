"""AI function endpoints: coaching chat, exercise evaluation, social listening."""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.core import ai_service
from academy.core.errors import FunctionCallError
from academy.models.user.user_model import User
from academy.schemas.functions.functions_schema import (
    CoachChatRequest,
    EvaluateRequest,
    SocialListeningRequest,
)
from academy.services.coaching_service import CoachingService
from academy.services.evaluation_service import EvaluationService
from academy.services.social_listening_service import SocialListeningService
from academy.services.submission_service import ExerciseNotFoundError, SubmissionNotFoundError

router = APIRouter()
logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid request: {location} {first.get('msg', '')}".strip()


@router.post("/ai-coach-chat", summary="Coaching reply for an exercise in progress")
def ai_coach_chat(
    payload: Dict[str, Any] = Body(default_factory=dict),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        request = CoachChatRequest.model_validate(payload)
        reply = CoachingService(db).reply(
            request.exercise_instance_id,
            request.user_message,
            request.conversation_history,
            request.current_response,
        )
    except ValidationError as exc:
        raise FunctionCallError(_validation_message(exc))
    except ExerciseNotFoundError as exc:
        raise FunctionCallError(str(exc))
    return {"success": True, **reply.to_wire()}


@router.post("/evaluate-exercise", summary="Evaluate a submission against its rubric")
def evaluate_exercise(
    payload: Dict[str, Any] = Body(default_factory=dict),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        request = EvaluateRequest.model_validate(payload)
        evaluation = EvaluationService(db).evaluate_submission(request.submission_id)
    except ValidationError as exc:
        raise FunctionCallError(_validation_message(exc))
    except SubmissionNotFoundError as exc:
        raise FunctionCallError(str(exc))
    return {"success": True, "evaluation": evaluation.to_wire()}


@router.post("/social-listening", summary="Sales Safari analysis of a topic")
def social_listening(
    payload: Dict[str, Any] = Body(default_factory=dict),
    current_user: User = Depends(get_current_user),
):
    try:
        request = SocialListeningRequest.model_validate(payload)
        analysis = SocialListeningService().analyze(request.topic, request.platforms, request.depth)
    except ValidationError as exc:
        raise FunctionCallError(_validation_message(exc), with_success_flag=True)
    except ai_service.AI_ERRORS as exc:
        # Includes the ValueError raised for a missing topic/platforms.
        raise FunctionCallError(str(exc) or exc.__class__.__name__, with_success_flag=True)
    return {"success": True, "analysis": analysis.to_wire()}
