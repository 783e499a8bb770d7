# File: scripts/run_seeds.py

import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))
from academy.db.base import Base  # noqa: F401 - registers every model
from academy.db import session as db_session
from academy.db.initial_data import seed_sample_course

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


if __name__ == "__main__":
    Base.metadata.create_all(bind=db_session.engine)
    db = db_session.SessionLocal()
    try:
        seed_sample_course(db)
        logger.info("Seeding complete.")
    finally:
        db.close()
