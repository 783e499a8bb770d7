import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.gamification.achievement_rules import ACHIEVEMENT_CATALOGUE, get_definition
from academy.models.user.achievement_model import AchievementType, UserAchievement

logger = logging.getLogger(__name__)


def get_user_achievement(db: Session, user_id: int, achievement_id: str) -> Optional[UserAchievement]:
    return (
        db.query(UserAchievement)
        .filter(UserAchievement.user_id == user_id, UserAchievement.achievement_id == achievement_id)
        .first()
    )


def list_user_achievements(db: Session, user_id: int) -> List[UserAchievement]:
    return (
        db.query(UserAchievement)
        .filter(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.earned_at.desc(), UserAchievement.id.desc())
        .all()
    )


def award_achievement(
    db: Session,
    user_id: int,
    achievement_id: str,
    achievement_type: AchievementType,
    details: Optional[Dict[str, Any]] = None,
) -> UserAchievement:
    """
    Insert the achievement unless the user already holds it.

    The existence check handles the common case; the unique constraint on
    (user_id, achievement_id) handles a concurrent award, in which case the
    row written by the other transaction is returned.
    """
    existing = get_user_achievement(db, user_id, achievement_id)
    if existing:
        return existing

    details = dict(details or {})
    definition = get_definition(achievement_id)
    title = details.get("title") or (definition.title if definition else achievement_id)
    description = details.get("description") or (definition.description if definition else None)

    achievement = UserAchievement(
        user_id=user_id,
        achievement_id=achievement_id,
        achievement_type=achievement_type,
        title=title,
        description=description,
        metadata_=details,
    )
    db.add(achievement)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Achievement '%s' already awarded to user %s", achievement_id, user_id)
        return get_user_achievement(db, user_id, achievement_id)

    db.refresh(achievement)
    logger.info("Achievement '%s' awarded to user %s", achievement_id, user_id)
    return achievement


def get_achievements_with_status(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Catalogue entries with their earned status, followed by earned ids outside the catalogue."""
    earned = {a.achievement_id: a for a in list_user_achievements(db, user_id)}

    result: List[Dict[str, Any]] = []
    for definition in ACHIEVEMENT_CATALOGUE:
        row = earned.pop(definition.id, None)
        result.append(
            {
                "id": definition.id,
                "type": definition.type.value,
                "title": definition.title,
                "description": definition.description,
                "earned": row is not None,
                "earned_at": row.earned_at if row else None,
            }
        )
    for row in earned.values():
        result.append(
            {
                "id": row.achievement_id,
                "type": row.achievement_type.value,
                "title": row.title,
                "description": row.description,
                "earned": True,
                "earned_at": row.earned_at,
            }
        )
    return result
