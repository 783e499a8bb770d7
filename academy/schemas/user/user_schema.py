from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from academy.models.user.user_model import SubscriptionTier
from academy.schemas.progress.progress_schema import CourseProgressWithCourse


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    display_name: Optional[str] = None
    subscription_tier: SubscriptionTier
    is_active: bool
    joined_date: Optional[datetime] = None
    total_points: int
    current_level: int
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date] = None
    competency_scores: Dict[str, int] = {}
    courses_completed: int
    exercises_completed: int


class Dashboard(BaseModel):
    user: UserRead
    courses_in_progress: List[CourseProgressWithCourse] = []
    recent_achievements: List[str] = []
    points_to_next_level: int
