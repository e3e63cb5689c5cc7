"""
Pydantic schemas for User model.
"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from exam_portal.schemas.common import CamelModel


class UserBase(CamelModel):
    """Base user schema."""

    name: str = Field(..., min_length=1)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for self-registration."""

    password: str = Field(..., min_length=6)


class User(UserBase):
    """Schema for user response."""

    id: int
    role: str
    is_active: bool
    created_at: Optional[datetime] = None


class Token(CamelModel):
    """Schema for JWT token."""

    access_token: str
    expires_in: int
    token_type: str
    user: User


class StudentBase(UserBase):
    """Fields a teacher can manage on a student account."""

    phone: str = ""
    college: str = ""
    group: str = ""
    account_status: str = "Active"


class StudentCreate(StudentBase):
    """Schema for staff-created student accounts."""

    password: str = Field(..., min_length=6)
    registration_date: Optional[datetime] = None


class StudentUpdate(StudentBase):
    """Schema for student update."""

    pass


class Student(CamelModel):
    """Schema for student response."""

    id: int
    name: str
    email: str
    phone: Optional[str] = ""
    college: Optional[str] = ""
    group: Optional[str] = Field("", validation_alias="group_name")
    account_status: Optional[str] = "Active"
    registration_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    photo: Optional[str] = ""


class ProfileUpdate(CamelModel):
    """
    Self-service profile edit. Only the fields sent are changed; role and
    account status are not editable here.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    college: Optional[str] = None
    group: Optional[str] = None
    photo: Optional[str] = None
