from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from academy.models.course.course_model import CourseStatus, CourseTier, TargetStage
from academy.models.course.lesson_model import LessonContentType


class LessonSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    lesson_order: int
    title: str
    estimated_minutes: int
    content_type: LessonContentType


class LessonRead(LessonSummary):
    course_id: int
    objectives: List[str] = []
    content: Dict[str, Any] = {}
    resources: List[Dict[str, Any]] = []


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    description: str
    price: float
    tier: CourseTier
    target_stage: TargetStage
    competencies: List[str] = []
    estimated_hours: int
    thumbnail: Optional[str] = None
    status: CourseStatus
    enrolled_students: int
    average_rating: float
    lesson_count: int = 0
    created_at: Optional[datetime] = None


class CourseDetail(CourseSummary):
    prerequisites: List[str] = []
    lessons: List[LessonSummary] = []
    is_enrolled: bool = False
    completion_percentage: int = 0
    completed_lessons: List[int] = []


class LessonPlayer(BaseModel):
    course: CourseSummary
    lesson: LessonRead
    previous_order: Optional[int] = None
    next_order: Optional[int] = None
    is_completed: bool = False
    exercise_ids: List[int] = []


class LessonCompletionResult(BaseModel):
    lesson_id: int
    completion_percentage: int
    course_completed: bool
    next_order: Optional[int] = None
    total_points: int
    current_level: int
