"""
Central catalogue of achievements (id, type, title, description) and the
thresholds that unlock them.

Awarded rows are stored in ``user_achievements``; the catalogue itself lives
in code so the achievements page can show locked entries too. Dynamic ids
(``{competency}-master``) get a generated definition when they are not listed.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from academy.models.user.achievement_model import AchievementType


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    type: AchievementType
    title: str
    description: str


ACHIEVEMENT_CATALOGUE: List[AchievementDefinition] = [
    AchievementDefinition("first-lesson", AchievementType.MILESTONE, "First Steps", "Complete your first lesson"),
    AchievementDefinition("first-exercise", AchievementType.MILESTONE, "Getting Started", "Submit your first exercise"),
    AchievementDefinition("first-course", AchievementType.MILESTONE, "Course Complete", "Finish your first course"),
    AchievementDefinition("7-day-streak", AchievementType.STREAK, "7-Day Streak", "Learn something every day for a week"),
    AchievementDefinition("30-day-streak", AchievementType.STREAK, "30-Day Streak", "Learn something every day for a month"),
    AchievementDefinition("SC1-master", AchievementType.COMPETENCY, "Market Validation Master", "Achieved 90+ score in SC1 (Market Validation)"),
    AchievementDefinition("SC2-master", AchievementType.COMPETENCY, "Product Strategy Master", "Achieved 90+ score in SC2 (Product Strategy)"),
    AchievementDefinition("SC3-master", AchievementType.COMPETENCY, "Customer Development Master", "Achieved 90+ score in SC3 (Customer Development)"),
    AchievementDefinition("100-points", AchievementType.MILESTONE, "Level Up", "Reach 100 total points"),
    AchievementDefinition("500-points", AchievementType.MILESTONE, "Rising Star", "Reach 500 total points"),
    AchievementDefinition("1000-points", AchievementType.MILESTONE, "Power User", "Reach 1000 total points"),
]

ACHIEVEMENTS_BY_ID: Dict[str, AchievementDefinition] = {a.id: a for a in ACHIEVEMENT_CATALOGUE}

# Streak lengths that unlock "{n}-day-streak".
STREAK_MILESTONES: Tuple[int, ...] = (7, 30)
# Point totals that unlock "{n}-points".
POINT_MILESTONES: Tuple[int, ...] = (100, 500, 1000)
COMPETENCY_MASTERY_THRESHOLD = 90
POINTS_PER_LEVEL = 100


def level_for_points(total_points: int) -> int:
    """Level 1 at 0 points, +1 every 100 points."""
    return max(total_points, 0) // POINTS_PER_LEVEL + 1


def competency_achievement_id(competency: str) -> str:
    return f"{competency}-master"


def get_definition(achievement_id: str) -> Optional[AchievementDefinition]:
    return ACHIEVEMENTS_BY_ID.get(achievement_id)
