"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.security import get_password_hash
from exam_portal.models.user import User, UserRole

logger = logging.getLogger(__name__)


def init_db(db: Session) -> User:
    """
    Make sure the first admin account exists.

    Args:
        db: Database session

    Returns:
        The admin user, new or existing
    """
    email = settings.FIRST_ADMIN_EMAIL.lower()
    admin = db.query(User).filter(User.email == email).first()
    if not admin:
        admin = User(
            name="System Administrator",
            email=email,
            hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info("Admin user %s created", email)
    return admin
