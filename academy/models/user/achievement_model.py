from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Enum as EnumSQL, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.db.base_class import Base

if TYPE_CHECKING:
    from .user_model import User


class AchievementType(str, enum.Enum):
    BADGE = "badge"
    MILESTONE = "milestone"
    STREAK = "streak"
    COMPETENCY = "competency"


class UserAchievement(Base):
    """A milestone reached by a user. One row per (user, achievement id)."""

    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    achievement_id: Mapped[str] = mapped_column(String(100), nullable=False)
    achievement_type: Mapped[AchievementType] = mapped_column(
        EnumSQL(AchievementType, name="achievement_type", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000))
    # ``metadata`` is reserved on declarative classes.
    metadata_: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="achievements")

    def __repr__(self):
        return f"<UserAchievement(user_id={self.user_id}, achievement_id='{self.achievement_id}')>"
