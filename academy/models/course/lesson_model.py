from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.db.base_class import Base

if TYPE_CHECKING:
    from .course_model import Course
    from ..exercise.exercise_instance_model import ExerciseInstance


class LessonContentType(str, enum.Enum):
    VIDEO = "video"
    ARTICLE = "article"
    INTERACTIVE = "interactive"
    CASE_STUDY = "case-study"
    ASSESSMENT = "assessment"


class Lesson(Base):
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("course_id", "lesson_order", name="uq_lesson_course_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    lesson_order: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    objectives: Mapped[List[str]] = mapped_column(JSON, default=list)
    estimated_minutes: Mapped[int] = mapped_column(Integer, default=10)
    content_type: Mapped[LessonContentType] = mapped_column(
        Enum(LessonContentType, name="lessoncontenttype", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    content: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    resources: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    course: Mapped["Course"] = relationship(back_populates="lessons")
    exercises: Mapped[List["ExerciseInstance"]] = relationship(back_populates="lesson", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Lesson(id={self.id}, course_id={self.course_id}, order={self.lesson_order})>"
