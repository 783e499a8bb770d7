# File: academy/crud/course_crud.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from academy.models.course.course_model import Course, CourseStatus, TargetStage
from academy.models.course.lesson_model import Lesson
from academy.models.progress.course_progress_model import CourseProgress
from academy.models.user.user_model import User

logger = logging.getLogger(__name__)


def list_published_courses(db: Session, stage: Optional[str] = None) -> List[Course]:
    """Published catalogue, newest first. ``stage`` of ``None``/``"all"`` disables the filter."""
    query = (
        db.query(Course)
        .options(selectinload(Course.lessons))
        .filter(Course.status == CourseStatus.PUBLISHED)
    )
    if stage and stage != "all":
        query = query.filter(Course.target_stage == TargetStage(stage))
    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


def get_course_by_slug(db: Session, slug: str) -> Optional[Course]:
    return (
        db.query(Course)
        .options(selectinload(Course.lessons))
        .filter(Course.slug == slug)
        .first()
    )


def get_lesson_by_order(db: Session, course_id: int, lesson_order: int) -> Optional[Lesson]:
    return (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id, Lesson.lesson_order == lesson_order)
        .first()
    )


def count_lessons(db: Session, course_id: int) -> int:
    return db.query(Lesson).filter(Lesson.course_id == course_id).count()


def get_neighbour_orders(db: Session, lesson: Lesson) -> tuple[Optional[int], Optional[int]]:
    """Order of the previous and next lesson in the same course (``None`` at the edges)."""
    previous = (
        db.query(Lesson.lesson_order)
        .filter(Lesson.course_id == lesson.course_id, Lesson.lesson_order < lesson.lesson_order)
        .order_by(Lesson.lesson_order.desc())
        .first()
    )
    following = (
        db.query(Lesson.lesson_order)
        .filter(Lesson.course_id == lesson.course_id, Lesson.lesson_order > lesson.lesson_order)
        .order_by(Lesson.lesson_order.asc())
        .first()
    )
    return (previous[0] if previous else None, following[0] if following else None)


def is_enrolled(user: User, course: Course) -> bool:
    return course.id in (user.enrolled_courses or [])


def enroll_user(db: Session, user: User, course: Course) -> CourseProgress:
    """
    Add the course to the user's enrolments and make sure a progress row exists.
    ``enrolled_students`` only moves on the first enrolment.
    """
    enrolled = list(user.enrolled_courses or [])
    if course.id not in enrolled:
        enrolled.append(course.id)
        user.enrolled_courses = enrolled
        course.enrolled_students = (course.enrolled_students or 0) + 1
        logger.info("User %s enrolled in course '%s'", user.id, course.slug)

    progress = (
        db.query(CourseProgress)
        .filter(CourseProgress.user_id == user.id, CourseProgress.course_id == course.id)
        .first()
    )
    if progress is None:
        progress = CourseProgress(user_id=user.id, course_id=course.id, completed_lessons=[])
        db.add(progress)

    db.commit()
    db.refresh(progress)
    return progress
