from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from academy.models.exercise.submission_model import SubmissionStatus


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exercise_instance_id: int
    user_response: Dict[str, Any] = {}
    ai_evaluation: Optional[Dict[str, Any]] = None
    scores: Optional[Dict[str, Any]] = None
    score: Optional[int] = None
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    evaluated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExerciseTemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: Optional[str] = None
    template_config: Dict[str, Any]
    evaluation_rubric: Dict[str, Any] = {}


class ExerciseDetail(BaseModel):
    id: int
    lesson_id: int
    prompt: str
    estimated_minutes: int
    template: ExerciseTemplateRead
    submission: Optional[SubmissionRead] = None
    read_only: bool = False
    form: List[Dict[str, Any]] = []
    missing_fields: List[str] = []


class DraftSave(BaseModel):
    user_response: Dict[str, Any] = Field(default_factory=dict)


class DraftEdit(BaseModel):
    """One editor operation applied to the stored draft."""

    op: Literal["update_field", "add_list_item", "update_list_item", "update_list_item_field", "remove_list_item"]
    field_id: str
    index: Optional[int] = None
    sub_field: Optional[str] = None
    value: Any = None


class SubmitRequest(BaseModel):
    # When omitted, the stored draft is submitted as is.
    user_response: Optional[Dict[str, Any]] = None


class SubmitResult(BaseModel):
    submission: SubmissionRead
    evaluation_scheduled: bool
    message: str
