# File: academy/models/exercise/submission_model.py
from sqlalchemy import Integer, DateTime, ForeignKey, JSON, Enum, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from academy.db.base_class import Base
from typing import Any, Dict, Optional, TYPE_CHECKING
from datetime import datetime
import enum

if TYPE_CHECKING:
    from ..user.user_model import User
    from .exercise_instance_model import ExerciseInstance


class SubmissionStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    EVALUATED = "evaluated"
    REVISED = "revised"


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    exercise_instance_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("exercise_instances.id", ondelete="CASCADE"), index=True
    )
    user_response: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    ai_evaluation: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    scores: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[SubmissionStatus] = mapped_column(
        Enum(SubmissionStatus, name="submissionstatus", values_callable=lambda obj: [e.value for e in obj]),
        default=SubmissionStatus.DRAFT,
        server_default=SubmissionStatus.DRAFT.value,
    )
    # Set once, when the learner submits; a draft is a row without it.
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    evaluated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="submissions")
    exercise_instance: Mapped["ExerciseInstance"] = relationship(back_populates="submissions")

    def __repr__(self):
        return f"<Submission(id={self.id}, status='{self.status}')>"
