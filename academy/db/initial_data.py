"""Sample catalogue: one published course, its lessons, exercise templates and instances."""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from academy.models.course.course_model import Course, CourseStatus, CourseTier, TargetStage
from academy.models.course.lesson_model import Lesson, LessonContentType
from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.exercise_template_model import ExerciseTemplate
from academy.services.exercise_template_service import parse_template_config

logger = logging.getLogger(__name__)

SAMPLE_COURSE_SLUG = "market-validation-foundations"

TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": "Problem Statement Canvas",
        "description": "Frame the problem you want to solve before thinking about solutions.",
        "category": "validation",
        "template_config": {
            "sections": [
                {"id": "customer", "label": "Target Customer", "description": "Who experiences this problem?", "inputType": "text"},
                {"id": "problem", "label": "Problem", "description": "What is the painful problem, in their words?", "inputType": "text"},
                {"id": "evidence", "label": "Evidence", "description": "Quotes, data points or observations", "inputType": "multiline", "maxItems": 5},
            ]
        },
        "ai_coaching_prompt_template": "You are a startup coach helping a founder articulate a sharp problem statement grounded in evidence.",
        "evaluation_rubric": {
            "criteria": [
                {"name": "Specificity", "description": "Customer and problem are concrete", "weight": 0.5, "scoringGuidance": "Penalize vague segments"},
                {"name": "Evidence", "description": "Claims are backed by observations", "weight": 0.3},
                {"name": "Clarity", "description": "Statement is easy to understand", "weight": 0.2},
            ],
            "passingScore": 70,
        },
    },
    {
        "name": "Customer Pain Matrix",
        "description": "Map the pains, gains and current workarounds of your customer.",
        "category": "validation",
        "template_config": {
            "quadrants": [
                {"id": "pains", "label": "Pains", "description": "What frustrates them?", "inputType": "multiline", "prompt": "Think about time, money and risk."},
                {"id": "gains", "label": "Gains", "description": "What outcome do they want?", "inputType": "multiline"},
                {"id": "workarounds", "label": "Workarounds", "description": "What do they do today?", "inputType": "multiline"},
                {"id": "triggers", "label": "Triggers", "description": "When does the pain become urgent?", "inputType": "multiline"},
            ],
            "followUp": {"label": "Biggest insight", "description": "What surprised you the most?", "inputType": "multiline", "maxItems": 3},
        },
        "ai_coaching_prompt_template": "You are a customer-development coach. Push the founder toward observed behaviour rather than opinions.",
        "evaluation_rubric": {
            "criteria": [
                {"name": "Depth", "description": "Pains go beyond the obvious", "weight": 0.6},
                {"name": "Evidence", "description": "Items are grounded in real conversations", "weight": 0.4},
            ],
            "passingScore": 70,
        },
    },
    {
        "name": "Customer Interview Plan",
        "description": "Plan your first round of problem interviews.",
        "category": "customer-development",
        "template_config": {
            "steps": [
                {"id": "hypotheses", "label": "Step 1: Hypotheses", "description": "What do you believe is true?", "inputType": "multiline", "minItems": 3},
                {
                    "id": "interviewees",
                    "label": "Step 2: Interviewees",
                    "description": "Who will you talk to?",
                    "inputType": "list",
                    "minItems": 5,
                    "fields": ["name", "role", "channel"],
                },
                {"id": "questions", "label": "Step 3: Questions", "description": "Open questions about past behaviour", "inputType": "list", "placeholder": "Tell me about the last time..."},
            ]
        },
        "ai_coaching_prompt_template": "You are an interview coach. Make sure questions are about past behaviour, not hypothetical futures.",
        "evaluation_rubric": {
            "criteria": [
                {"name": "Hypothesis quality", "description": "Hypotheses are falsifiable", "weight": 0.4},
                {"name": "Sampling", "description": "Interviewees match the target customer", "weight": 0.3},
                {"name": "Question design", "description": "Questions avoid leading the interviewee", "weight": 0.3},
            ],
            "passingScore": 75,
        },
    },
]

LESSONS: List[Dict[str, Any]] = [
    {
        "lesson_order": 1,
        "title": "Why most startups build the wrong thing",
        "objectives": ["Understand problem/solution fit", "Spot vanity validation"],
        "estimated_minutes": 12,
        "content_type": LessonContentType.VIDEO,
        "content": {"videoUrl": "https://example.com/videos/wrong-thing.mp4", "transcript": ""},
        "template": "Problem Statement Canvas",
    },
    {
        "lesson_order": 2,
        "title": "Mapping customer pain",
        "objectives": ["Separate pains from gains", "Identify existing workarounds"],
        "estimated_minutes": 15,
        "content_type": LessonContentType.ARTICLE,
        "content": {"markdown": "## Mapping customer pain\n\nStart from what customers already do."},
        "template": "Customer Pain Matrix",
    },
    {
        "lesson_order": 3,
        "title": "Running problem interviews",
        "objectives": ["Plan interviews", "Ask about past behaviour"],
        "estimated_minutes": 20,
        "content_type": LessonContentType.INTERACTIVE,
        "content": {"steps": ["Recruit", "Interview", "Synthesize"]},
        "template": "Customer Interview Plan",
    },
]


def seed_exercise_templates(db: Session) -> Dict[str, ExerciseTemplate]:
    logger.info("--- Seeding exercise templates ---")
    templates: Dict[str, ExerciseTemplate] = {}
    for data in TEMPLATES:
        # Fails loudly on a malformed configuration.
        parse_template_config(data["template_config"])
        template = db.query(ExerciseTemplate).filter(ExerciseTemplate.name == data["name"]).first()
        if template is None:
            template = ExerciseTemplate(**data)
            db.add(template)
            db.flush()
        templates[template.name] = template
    db.commit()
    logger.info(f"Exercise templates ready: {len(templates)}")
    return templates


def seed_sample_course(db: Session) -> Course:
    templates = seed_exercise_templates(db)

    logger.info("--- Seeding sample course ---")
    course = db.query(Course).filter(Course.slug == SAMPLE_COURSE_SLUG).first()
    if course is not None:
        logger.info("Sample course already present.")
        return course

    course = Course(
        title="Market Validation Foundations",
        slug=SAMPLE_COURSE_SLUG,
        description="Validate that a real, painful problem exists before writing a line of code.",
        price=0.0,
        tier=CourseTier.FOUNDATION,
        target_stage=TargetStage.IDEA,
        competencies=["SC1", "SC3"],
        prerequisites=[],
        estimated_hours=2,
        status=CourseStatus.PUBLISHED,
    )
    db.add(course)
    db.flush()

    for data in LESSONS:
        data = dict(data)
        template_name = data.pop("template")
        lesson = Lesson(course_id=course.id, resources=[], **data)
        db.add(lesson)
        db.flush()
        db.add(
            ExerciseInstance(
                lesson_id=lesson.id,
                template_id=templates[template_name].id,
                prompt=f"Apply the {template_name} to your own startup idea.",
                estimated_minutes=15,
            )
        )

    db.commit()
    db.refresh(course)
    logger.info(f"Sample course '{course.slug}' created with {len(LESSONS)} lessons.")
    return course
