from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.api.v2.endpoints.progress_router import list_course_progress
from academy.crud import achievement_crud
from academy.gamification.achievement_rules import POINTS_PER_LEVEL
from academy.models.user.user_model import User
from academy.schemas.user.user_schema import Dashboard, UserRead

router = APIRouter()


@router.get("/me", response_model=Dashboard, summary="Dashboard of the current user")
def read_user_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    total_points = current_user.total_points or 0
    in_progress = [p for p in list_course_progress(db, current_user) if p.completed_at is None]
    recent = achievement_crud.list_user_achievements(db, current_user.id)[:5]

    return Dashboard(
        user=UserRead.model_validate(current_user),
        courses_in_progress=in_progress,
        recent_achievements=[a.title for a in recent],
        points_to_next_level=POINTS_PER_LEVEL - (total_points % POINTS_PER_LEVEL),
    )
