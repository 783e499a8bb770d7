# File: academy/models/exercise/exercise_template_model.py
from sqlalchemy import Integer, String, Text, DateTime, JSON, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from academy.db.base_class import Base
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from .exercise_instance_model import ExerciseInstance


class ExerciseTemplate(Base):
    """
    Reusable form definition for an exercise.

    ``template_config`` holds exactly one of ``sections``, ``quadrants``
    (optionally with ``followUp``) or ``steps``; ``evaluation_rubric`` holds
    ``criteria`` (name, description, weight, scoringGuidance) and
    ``passingScore``.
    """

    __tablename__ = "exercise_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    template_config: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    ai_coaching_prompt_template: Mapped[str] = mapped_column(Text, default="")
    evaluation_rubric: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    instances: Mapped[List["ExerciseInstance"]] = relationship(back_populates="template")

    def __repr__(self):
        return f"<ExerciseTemplate(id={self.id}, name='{self.name}')>"
