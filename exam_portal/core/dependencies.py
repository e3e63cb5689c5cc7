"""
Dependency injection for FastAPI endpoints.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.errors import ForbiddenError, UnauthorizedError
from exam_portal.core.security import decode_token
from exam_portal.db.base import get_db
from exam_portal.models.user import User, UserRole

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    bearer_token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    """
    Resolve the caller from the auth cookie or a bearer token.

    The identity is always re-read from the database; nothing cached on the
    client is trusted for authorization.

    Raises:
        UnauthorizedError: If the token is missing, invalid or the user is gone
    """
    token = request.cookies.get(settings.AUTH_COOKIE_NAME) or bearer_token
    if not token:
        raise UnauthorizedError("Unauthorized")

    payload = decode_token(token)
    if payload is None or payload.get("sub") is None:
        raise UnauthorizedError("Could not validate credentials")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Could not validate credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise UnauthorizedError("Could not validate credentials")

    return user


def require_student(current_user: User = Depends(get_current_user)) -> User:
    """Only students may take exams and read their own results."""
    if current_user.role != UserRole.STUDENT:
        raise ForbiddenError("Forbidden")
    return current_user


def require_staff(current_user: User = Depends(get_current_user)) -> User:
    """Teachers and admins manage the question bank, exams and reports."""
    if not current_user.is_staff:
        raise ForbiddenError("Forbidden: only teachers or admins can perform this action")
    return current_user
