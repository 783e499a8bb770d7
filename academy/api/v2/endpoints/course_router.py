import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from academy.api.v2.dependencies import get_db, get_current_user
from academy.crud import course_crud
from academy.models.course.course_model import TargetStage
from academy.models.user.user_model import User
from academy.schemas.course.course_schema import CourseDetail, CourseSummary, LessonSummary
from academy.schemas.progress.progress_schema import CourseProgressRead
from academy.services.progress_service import ProgressService

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_course_or_404(db: Session, slug: str):
    course = course_crud.get_course_by_slug(db, slug)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="course_not_found")
    return course


@router.get("/", response_model=List[CourseSummary], summary="Published course catalogue")
def list_courses(
    stage: Optional[str] = Query(default=None, description="Target stage filter ('all' for every stage)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if stage and stage != "all" and stage not in {s.value for s in TargetStage}:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="invalid_stage")
    courses = course_crud.list_published_courses(db, stage)
    return [CourseSummary.model_validate(course) for course in courses]


@router.get("/{slug}", response_model=CourseDetail, summary="Course detail with its ordered lessons")
def get_course(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    course = _get_course_or_404(db, slug)
    progress = ProgressService(db, current_user).get_course_progress(course.id)

    summary = CourseSummary.model_validate(course)
    return CourseDetail(
        **summary.model_dump(),
        prerequisites=list(course.prerequisites or []),
        lessons=[LessonSummary.model_validate(lesson) for lesson in course.lessons],
        is_enrolled=course_crud.is_enrolled(current_user, course),
        completion_percentage=progress.completion_percentage if progress else 0,
        completed_lessons=list(progress.completed_lessons or []) if progress else [],
    )


@router.post("/{slug}/enroll", response_model=CourseProgressRead, summary="Enroll in a course")
def enroll_in_course(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    course = _get_course_or_404(db, slug)
    progress = course_crud.enroll_user(db, current_user, course)
    return CourseProgressRead.model_validate(progress)
