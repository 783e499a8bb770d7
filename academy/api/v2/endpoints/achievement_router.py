from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.crud import achievement_crud
from academy.models.user.user_model import User
from academy.schemas.progress.progress_schema import AchievementList, AchievementStatus

router = APIRouter()


@router.get("/", response_model=AchievementList, summary="Achievements and unlock status")
def list_achievements(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries = [AchievementStatus(**entry) for entry in achievement_crud.get_achievements_with_status(db, current_user.id)]
    return AchievementList(
        earned_count=sum(1 for entry in entries if entry.earned),
        total_count=len(entries),
        achievements=entries,
    )
