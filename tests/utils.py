"""Utility helpers for test factories."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from academy.core.security import create_access_token
from academy.models.course.course_model import Course, CourseStatus, CourseTier, TargetStage
from academy.models.course.lesson_model import Lesson, LessonContentType
from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.exercise_template_model import ExerciseTemplate
from academy.models.user.user_model import User

SECTIONS_CONFIG: Dict[str, Any] = {
    "sections": [
        {"id": "problem", "label": "Problem", "description": "Describe the problem", "inputType": "text"},
        {"id": "evidence", "label": "Evidence", "description": "What did you observe?", "inputType": "multiline", "maxItems": 3},
    ]
}

RUBRIC: Dict[str, Any] = {
    "criteria": [
        {"name": "Clarity", "description": "Easy to follow", "weight": 0.5},
        {"name": "Evidence", "description": "Backed by data", "weight": 0.3},
        {"name": "Depth", "description": "Goes beyond the obvious", "weight": 0.2},
    ],
    "passingScore": 70,
}


def create_user(db, **kwargs) -> User:
    defaults = {
        "email": "user@example.com",
        "display_name": "Founder",
        "is_active": True,
        "enrolled_courses": [],
        "completed_lessons": [],
        "competency_scores": {},
    }
    defaults.update(kwargs)
    user = User(**defaults)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def create_course(
    db,
    *,
    slug: str = "validation-101",
    lesson_count: int = 3,
    competencies: Optional[List[str]] = None,
    status: CourseStatus = CourseStatus.PUBLISHED,
    target_stage: TargetStage = TargetStage.IDEA,
    **kwargs,
) -> Course:
    course = Course(
        title=kwargs.pop("title", "Validation 101"),
        slug=slug,
        description=kwargs.pop("description", "Find a problem worth solving"),
        tier=kwargs.pop("tier", CourseTier.FOUNDATION),
        target_stage=target_stage,
        competencies=competencies if competencies is not None else ["SC1"],
        prerequisites=[],
        estimated_hours=2,
        status=status,
        **kwargs,
    )
    for order in range(1, lesson_count + 1):
        course.lessons.append(
            Lesson(
                lesson_order=order,
                title=f"Lesson {order}",
                objectives=[],
                content_type=LessonContentType.ARTICLE,
                content={"markdown": f"Lesson {order}"},
                resources=[],
            )
        )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def create_exercise(
    db,
    lesson: Lesson,
    *,
    template_config: Optional[Dict[str, Any]] = None,
    rubric: Optional[Dict[str, Any]] = None,
    name: str = "Problem Canvas",
) -> ExerciseInstance:
    template = ExerciseTemplate(
        name=name,
        description="Frame the problem",
        category="validation",
        template_config=template_config or SECTIONS_CONFIG,
        ai_coaching_prompt_template="Coach the founder toward evidence.",
        evaluation_rubric=rubric or RUBRIC,
    )
    db.add(template)
    db.flush()
    instance = ExerciseInstance(
        lesson_id=lesson.id,
        template_id=template.id,
        prompt="Fill in the canvas",
        estimated_minutes=15,
    )
    db.add(instance)
    db.commit()
    db.refresh(instance)
    return instance
