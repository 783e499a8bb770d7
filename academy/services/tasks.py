# File: academy/services/tasks.py
import logging

from academy.db import session as db_session

logger = logging.getLogger(__name__)


def run_submission_evaluation(submission_id: int) -> None:
    """
    Background task evaluating a freshly submitted exercise.
    It opens its own database session since the request's one is closed by then.
    """
    from academy.services.evaluation_service import EvaluationService

    db = db_session.SessionLocal()
    try:
        result = EvaluationService(db).evaluate_submission(submission_id)
        logger.info("Background evaluation done for submission %s: %s/100", submission_id, result.overall_score)
    except Exception as e:
        db.rollback()
        logger.error("Background evaluation failed for submission %s: %s", submission_id, e, exc_info=True)
    finally:
        db.close()
