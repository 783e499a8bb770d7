"""Registers every SQLAlchemy model on ``Base.metadata``."""

from academy.db.base_class import Base

# Users & gamification
from academy.models.user.user_model import User
from academy.models.user.achievement_model import UserAchievement

# Catalogue
from academy.models.course.course_model import Course
from academy.models.course.lesson_model import Lesson

# Exercises
from academy.models.exercise.exercise_template_model import ExerciseTemplate
from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.submission_model import Submission

# Progress
from academy.models.progress.course_progress_model import CourseProgress
