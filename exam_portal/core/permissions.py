"""
Access control for student-scoped resources.

Students only ever see their own assignments and results. Staff (teachers
and admins) may look at any student's records.
"""
from typing import Optional

from exam_portal.core.errors import ForbiddenError
from exam_portal.models.user import User


def resolve_student_scope(current_user: User, student_id: Optional[int]) -> int:
    """
    Decide which student's records the caller may read.

    Args:
        current_user: Authenticated caller
        student_id: Requested student, or None for the caller themself

    Returns:
        The student id to query

    Raises:
        ForbiddenError: A student asking for someone else's records
    """
    if student_id is None or student_id == current_user.id:
        return current_user.id

    if not current_user.is_staff:
        raise ForbiddenError("Forbidden")

    return student_id
