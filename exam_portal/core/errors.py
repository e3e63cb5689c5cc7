"""
Domain errors raised by services and translated to HTTP responses in main.py.
"""
from fastapi import status


class ExamPortalError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthorizedError(ExamPortalError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ExamPortalError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ExamPortalError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ExamPortalError):
    status_code = status.HTTP_409_CONFLICT


class ValidationFailedError(ExamPortalError):
    status_code = status.HTTP_400_BAD_REQUEST
