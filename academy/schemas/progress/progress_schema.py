"""Pydantic schemas for learner progress, stats and achievements."""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class CourseProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    completed_lessons: List[int] = []
    current_lesson_id: Optional[int] = None
    completion_percentage: int
    time_spent_minutes: int = 0
    started_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class CourseProgressWithCourse(CourseProgressRead):
    course_title: str
    course_slug: str


class UserStats(BaseModel):
    user_id: int
    total_points: int
    current_level: int
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date] = None
    competency_scores: Dict[str, int] = {}
    courses_completed: int
    exercises_completed: int
    lessons_completed: int = 0
    enrolled_courses: int = 0


class AchievementStatus(BaseModel):
    id: str
    type: str
    title: str
    description: Optional[str] = None
    earned: bool
    earned_at: Optional[datetime] = None


class AchievementList(BaseModel):
    earned_count: int
    total_count: int
    achievements: List[AchievementStatus]
