# File: academy/models/exercise/exercise_instance_model.py
from sqlalchemy import Integer, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from academy.db.base_class import Base
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from .exercise_template_model import ExerciseTemplate
    from .submission_model import Submission
    from ..course.lesson_model import Lesson


class ExerciseInstance(Base):
    __tablename__ = "exercise_instances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    lesson_id: Mapped[int] = mapped_column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), index=True)
    template_id: Mapped[int] = mapped_column(Integer, ForeignKey("exercise_templates.id"), index=True)
    prompt: Mapped[str] = mapped_column(Text, default="")
    estimated_minutes: Mapped[int] = mapped_column(Integer, default=15)
    custom_config: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    lesson: Mapped["Lesson"] = relationship(back_populates="exercises")
    template: Mapped["ExerciseTemplate"] = relationship(back_populates="instances")
    submissions: Mapped[List["Submission"]] = relationship(back_populates="exercise_instance", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ExerciseInstance(id={self.id}, template_id={self.template_id})>"
