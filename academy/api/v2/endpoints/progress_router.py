from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.models.course.course_model import Course
from academy.models.progress.course_progress_model import CourseProgress
from academy.models.user.user_model import User
from academy.schemas.progress.progress_schema import CourseProgressRead, CourseProgressWithCourse, UserStats
from academy.services.progress_service import ProgressService

router = APIRouter()


@router.get("/stats", response_model=UserStats, summary="Points, level, streaks and competencies")
def get_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ProgressService(db, current_user).get_user_stats()


def list_course_progress(db: Session, user: User) -> List[CourseProgressWithCourse]:
    rows = (
        db.query(CourseProgress, Course)
        .join(Course, Course.id == CourseProgress.course_id)
        .filter(CourseProgress.user_id == user.id)
        .order_by(CourseProgress.last_accessed.desc(), CourseProgress.id.desc())
        .all()
    )
    return [
        CourseProgressWithCourse(
            **CourseProgressRead.model_validate(progress).model_dump(),
            course_title=course.title,
            course_slug=course.slug,
        )
        for progress, course in rows
    ]


@router.get("/courses", response_model=List[CourseProgressWithCourse], summary="Progress in every started course")
def get_courses_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_course_progress(db, current_user)


@router.post("/streak", response_model=UserStats, summary="Record today's activity")
def record_activity(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ProgressService(db, current_user)
    if service.update_streak() is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="streak_update_failed")
    return service.get_user_stats()
