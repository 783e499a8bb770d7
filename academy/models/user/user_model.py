from sqlalchemy import Integer, String, Boolean, Date, DateTime, JSON, func, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from academy.db.base_class import Base
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import date, datetime
import enum

if TYPE_CHECKING:
    from .achievement_model import UserAchievement
    from ..progress.course_progress_model import CourseProgress
    from ..exercise.submission_model import Submission


class SubscriptionTier(str, enum.Enum):
    FREE = "free"
    CORE = "core"
    PREMIUM = "premium"
    ELITE = "elite"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    subscription_tier: Mapped[SubscriptionTier] = mapped_column(
        Enum(SubscriptionTier, name="subscriptiontier", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=SubscriptionTier.FREE,
        server_default=SubscriptionTier.FREE.value,
    )
    joined_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # --- Learning state (lists of row ids, set semantics) ---
    enrolled_courses: Mapped[List[int]] = mapped_column(JSON, default=list)
    completed_lessons: Mapped[List[int]] = mapped_column(JSON, default=list)

    # --- Gamification ---
    total_points: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    current_level: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    current_streak: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    longest_streak: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    last_activity_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    competency_scores: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    courses_completed: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    exercises_completed: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    achievements: Mapped[List["UserAchievement"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    course_progress: Mapped[List["CourseProgress"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    submissions: Mapped[List["Submission"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
