import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.crud import achievement_crud, course_crud
from academy.gamification.achievement_rules import (
    COMPETENCY_MASTERY_THRESHOLD,
    POINT_MILESTONES,
    STREAK_MILESTONES,
    competency_achievement_id,
    get_definition,
    level_for_points,
)
from academy.models.progress.course_progress_model import CourseProgress
from academy.models.user.achievement_model import AchievementType, UserAchievement
from academy.models.user.user_model import User
from academy.utils.number_utils import clamp, round_half_up

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> date:
    return _utcnow().date()


class ProgressService:
    """
    Learner progress: per-course completion, points and levels, daily streak,
    competency scores and achievements.

    Every public operation commits its own work. A database error is logged,
    the session rolled back, and the operation returns ``None``.
    """

    def __init__(self, db: Session, user: User):
        self.db = db
        self.user = user

    # -----------------------------
    # Course progress
    # -----------------------------

    def _find_progress(self, course_id: int) -> Optional[CourseProgress]:
        return (
            self.db.query(CourseProgress)
            .filter(CourseProgress.user_id == self.user.id, CourseProgress.course_id == course_id)
            .first()
        )

    def _get_or_create_progress(self, course_id: int) -> CourseProgress:
        progress = self._find_progress(course_id)
        if progress is None:
            progress = CourseProgress(
                user_id=self.user.id,
                course_id=course_id,
                completed_lessons=[],
                started_at=_utcnow(),
                last_accessed=_utcnow(),
            )
            self.db.add(progress)
            self.db.flush()
        return progress

    def get_course_progress(self, course_id: int) -> Optional[CourseProgress]:
        try:
            return self._find_progress(course_id)
        except SQLAlchemyError:
            logger.exception("Error loading course progress (user=%s, course=%s)", self.user.id, course_id)
            self.db.rollback()
            return None

    def start_course(self, course_id: int) -> Optional[CourseProgress]:
        """Return the existing progress row, or create it."""
        try:
            progress = self._get_or_create_progress(course_id)
            self.db.commit()
            return progress
        except SQLAlchemyError:
            logger.exception("Error starting course %s for user %s", course_id, self.user.id)
            self.db.rollback()
            return None

    def mark_lesson_complete(self, course_id: int, lesson_id: int) -> Optional[CourseProgress]:
        """
        Add the lesson to the completed set and recompute the percentage
        against a fresh lesson count. Completing an already completed lesson
        changes nothing.
        """
        try:
            progress = self._get_or_create_progress(course_id)
            completed = list(progress.completed_lessons or [])
            if lesson_id in completed:
                self.db.commit()
                return progress

            completed.append(lesson_id)
            total_lessons = course_crud.count_lessons(self.db, course_id) or 1
            percentage = min(100, round_half_up(100 * len(completed) / total_lessons))

            progress.completed_lessons = completed
            progress.completion_percentage = percentage
            progress.last_accessed = _utcnow()

            user_completed = list(self.user.completed_lessons or [])
            first_lesson_ever = not user_completed
            if lesson_id not in user_completed:
                user_completed.append(lesson_id)
                self.user.completed_lessons = user_completed

            # completed_at doubles as the "bonus already paid" marker.
            course_just_completed = percentage >= 100 and progress.completed_at is None
            if course_just_completed:
                progress.completed_at = _utcnow()
                self.user.courses_completed = (self.user.courses_completed or 0) + 1

            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error marking lesson %s complete (user=%s)", lesson_id, self.user.id)
            self.db.rollback()
            return None

        logger.info(
            "User %s completed lesson %s (course %s: %s%%)", self.user.id, lesson_id, course_id, percentage
        )
        self.award_points(settings.LESSON_COMPLETION_POINTS, "lesson_completed")
        if course_just_completed:
            self.award_points(settings.COURSE_COMPLETION_POINTS, "course_completed")

        if first_lesson_ever:
            self.award_achievement("first-lesson", AchievementType.MILESTONE)
        if course_just_completed and self.user.courses_completed == 1:
            self.award_achievement("first-course", AchievementType.MILESTONE, {"course_id": course_id})
        return progress

    def update_current_lesson(self, course_id: int, lesson_id: int) -> Optional[CourseProgress]:
        """Move the resume pointer, then count today towards the streak."""
        try:
            progress = self._get_or_create_progress(course_id)
            progress.current_lesson_id = lesson_id
            progress.last_accessed = _utcnow()
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error updating current lesson (user=%s, course=%s)", self.user.id, course_id)
            self.db.rollback()
            return None

        self.update_streak()
        return progress

    # -----------------------------
    # Streak, points, competencies
    # -----------------------------

    def update_streak(self, today: Optional[date] = None) -> Optional[User]:
        """
        Calendar-day streak: activity on the same day changes nothing, the next
        day extends the streak, any longer gap restarts it at 1.
        """
        today = today or _today()
        last = self.user.last_activity_date
        current = self.user.current_streak or 0

        if last is None:
            new_streak = 1
        else:
            gap = (today - last).days
            if gap <= 0:
                return self.user
            new_streak = current + 1 if gap == 1 else 1

        try:
            self.user.current_streak = new_streak
            self.user.longest_streak = max(new_streak, self.user.longest_streak or 0)
            self.user.last_activity_date = today
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error updating streak for user %s", self.user.id)
            self.db.rollback()
            return None

        if new_streak in STREAK_MILESTONES:
            self.award_achievement(
                f"{new_streak}-day-streak",
                AchievementType.STREAK,
                {
                    "title": f"{new_streak}-Day Streak",
                    "description": f"Learned something every day for {new_streak} days",
                    "days": new_streak,
                },
            )
        return self.user

    def award_points(self, amount: int, activity_type: str) -> Optional[User]:
        previous_total = self.user.total_points or 0
        new_total = previous_total + amount
        try:
            self.user.total_points = new_total
            self.user.current_level = level_for_points(new_total)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error awarding %s points (%s) to user %s", amount, activity_type, self.user.id)
            self.db.rollback()
            return None

        logger.info("User %s +%s points for %s (total=%s)", self.user.id, amount, activity_type, new_total)
        for milestone in POINT_MILESTONES:
            if previous_total < milestone <= new_total:
                self.award_achievement(f"{milestone}-points", AchievementType.MILESTONE, {"points": new_total})
        return self.user

    def update_competency_score(self, competency: str, score: int) -> Optional[int]:
        """
        Blend ``score`` into the stored value as the rounded mean of old and
        new. A competency without a stored value starts from 0.
        """
        score = clamp(int(score))
        scores = dict(self.user.competency_scores or {})
        previous = int(scores.get(competency) or 0)
        new_score = clamp(round_half_up((previous + score) / 2))
        scores[competency] = new_score

        try:
            self.user.competency_scores = scores
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Error updating competency %s for user %s", competency, self.user.id)
            self.db.rollback()
            return None

        if new_score >= COMPETENCY_MASTERY_THRESHOLD:
            achievement_id = competency_achievement_id(competency)
            definition = get_definition(achievement_id)
            self.award_achievement(
                achievement_id,
                AchievementType.COMPETENCY,
                {
                    "title": definition.title if definition else f"{competency} Master",
                    "description": definition.description if definition else f"Achieved 90+ score in {competency}",
                    "competency": competency,
                    "score": new_score,
                },
            )
        return new_score

    # -----------------------------
    # Achievements & stats
    # -----------------------------

    def award_achievement(
        self,
        achievement_id: str,
        achievement_type: AchievementType,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[UserAchievement]:
        try:
            return achievement_crud.award_achievement(
                self.db, self.user.id, achievement_id, achievement_type, details
            )
        except SQLAlchemyError:
            logger.exception("Error awarding achievement '%s' to user %s", achievement_id, self.user.id)
            self.db.rollback()
            return None

    def get_user_stats(self) -> Dict[str, Any]:
        user = self.user
        return {
            "user_id": user.id,
            "total_points": user.total_points or 0,
            "current_level": user.current_level or 1,
            "current_streak": user.current_streak or 0,
            "longest_streak": user.longest_streak or 0,
            "last_activity_date": user.last_activity_date,
            "competency_scores": dict(user.competency_scores or {}),
            "courses_completed": user.courses_completed or 0,
            "exercises_completed": user.exercises_completed or 0,
            "lessons_completed": len(user.completed_lessons or []),
            "enrolled_courses": len(user.enrolled_courses or []),
        }
