from academy.db.initial_data import SAMPLE_COURSE_SLUG, seed_sample_course
from academy.models.course.course_model import Course
from academy.models.exercise.exercise_instance_model import ExerciseInstance
from academy.models.exercise.exercise_template_model import ExerciseTemplate


def test_seed_sample_course_is_idempotent(db_session):
    course = seed_sample_course(db_session)
    seed_sample_course(db_session)

    assert course.slug == SAMPLE_COURSE_SLUG
    assert [lesson.lesson_order for lesson in course.lessons] == [1, 2, 3]
    assert db_session.query(Course).count() == 1
    assert db_session.query(ExerciseTemplate).count() == 3
    assert db_session.query(ExerciseInstance).count() == 3
