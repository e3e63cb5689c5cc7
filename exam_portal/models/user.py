"""
User model for authentication and authorization.
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime
from sqlalchemy.sql import func

from exam_portal.db.base import Base


class UserRole:
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

    STAFF = (TEACHER, ADMIN)


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, default=UserRole.STUDENT, index=True)  # student, teacher, admin

    phone = Column(String, default="")
    college = Column(String, default="")
    group_name = Column(String, default="")
    account_status = Column(String, default="Active")  # Active, Inactive
    photo = Column(String, default="")  # uploaded image url
    is_active = Column(Boolean, default=True)

    registration_date = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_staff(self) -> bool:
        return self.role in UserRole.STAFF
