import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.crud import course_crud
from academy.models.user.user_model import User
from academy.schemas.course.course_schema import CourseSummary, LessonCompletionResult, LessonPlayer, LessonRead
from academy.services.progress_service import ProgressService

router = APIRouter()
logger = logging.getLogger(__name__)


def _load_lesson(db: Session, slug: str, order: int):
    course = course_crud.get_course_by_slug(db, slug)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")
    lesson = course_crud.get_lesson_by_order(db, course.id, order)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="lesson_not_found")
    return course, lesson


@router.get("/{slug}/{order}", response_model=LessonPlayer, summary="Open a lesson")
def open_lesson(
    slug: str,
    order: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the lesson with its neighbours and move the resume pointer (which counts towards the streak)."""
    course, lesson = _load_lesson(db, slug, order)
    previous_order, next_order = course_crud.get_neighbour_orders(db, lesson)

    service = ProgressService(db, current_user)
    progress = service.update_current_lesson(course.id, lesson.id)
    completed = progress.completed_lessons if progress else []

    return LessonPlayer(
        course=CourseSummary.model_validate(course),
        lesson=LessonRead.model_validate(lesson),
        previous_order=previous_order,
        next_order=next_order,
        is_completed=lesson.id in (completed or []),
        exercise_ids=[exercise.id for exercise in lesson.exercises],
    )


@router.post("/{slug}/{order}/complete", response_model=LessonCompletionResult, summary="Mark a lesson complete")
def complete_lesson(
    slug: str,
    order: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    course, lesson = _load_lesson(db, slug, order)
    service = ProgressService(db, current_user)
    progress = service.mark_lesson_complete(course.id, lesson.id)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="progress_update_failed")

    _, next_order = course_crud.get_neighbour_orders(db, lesson)
    return LessonCompletionResult(
        lesson_id=lesson.id,
        completion_percentage=progress.completion_percentage,
        course_completed=progress.completed_at is not None,
        next_order=next_order,
        total_points=current_user.total_points or 0,
        current_level=current_user.current_level or 1,
    )
