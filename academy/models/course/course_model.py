# File: academy/models/course/course_model.py
from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, DateTime, Enum, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.db.base_class import Base

if TYPE_CHECKING:
    from .lesson_model import Lesson


class CourseTier(str, enum.Enum):
    FOUNDATION = "foundation"
    GROWTH = "growth"
    SCALE = "scale"
    MASTERY = "mastery"


class TargetStage(str, enum.Enum):
    IDEA = "idea"
    PRE_LAUNCH = "pre-launch"
    EARLY_REVENUE = "0-10k"
    GROWING_REVENUE = "10k-100k"
    SCALING = "scaling"


class CourseStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def _enum_values(obj):
    return [e.value for e in obj]


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[float] = mapped_column(Float, default=0.0)
    tier: Mapped[CourseTier] = mapped_column(
        Enum(CourseTier, name="coursetier", values_callable=_enum_values), nullable=False
    )
    target_stage: Mapped[TargetStage] = mapped_column(
        Enum(TargetStage, name="targetstage", values_callable=_enum_values), nullable=False
    )
    competencies: Mapped[List[str]] = mapped_column(JSON, default=list)
    prerequisites: Mapped[List[str]] = mapped_column(JSON, default=list)
    estimated_hours: Mapped[int] = mapped_column(Integer, default=0)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500))
    status: Mapped[CourseStatus] = mapped_column(
        Enum(CourseStatus, name="coursestatus", values_callable=_enum_values),
        default=CourseStatus.DRAFT,
        server_default=CourseStatus.DRAFT.value,
    )
    enrolled_students: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    lessons: Mapped[List["Lesson"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Lesson.lesson_order",
    )

    @property
    def lesson_count(self) -> int:
        return len(self.lessons)

    def __repr__(self):
        return f"<Course(id={self.id}, slug='{self.slug}')>"
