"""
Script to initialize the database with tables and the first admin account.
"""
import logging

from exam_portal.db.base import SessionLocal, engine
from exam_portal.db.init_db import init_db
from exam_portal.models import Base

logging.basicConfig(level=logging.INFO, format='%(levelname)s:\t%(name)s\t%(message)s')
logger = logging.getLogger("init_db")


def init() -> None:
    """Initialize database."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    logger.info("Seeding initial data...")
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()

    logger.info("Database initialization complete")


if __name__ == "__main__":
    init()
