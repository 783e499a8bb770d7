# File: academy/models/progress/course_progress_model.py

from sqlalchemy import Integer, DateTime, ForeignKey, JSON, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from academy.db.base_class import Base
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from ..user.user_model import User
    from ..course.course_model import Course


class CourseProgress(Base):
    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_progress_user_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), index=True)

    # Stored as a list, read as a set: order is irrelevant.
    completed_lessons: Mapped[List[int]] = mapped_column(JSON, default=list)
    current_lesson_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("lessons.id", ondelete="SET NULL"), nullable=True
    )
    completion_percentage: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    time_spent_minutes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    last_accessed: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship(back_populates="course_progress")
    course: Mapped["Course"] = relationship()

    def __repr__(self):
        return f"<CourseProgress(user_id={self.user_id}, course_id={self.course_id}, pct={self.completion_percentage})>"
