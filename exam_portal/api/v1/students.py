"""
Student account management for teachers and admins.
"""
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_staff
from exam_portal.core.security import get_password_hash
from exam_portal.db.base import get_db
from exam_portal.models.user import User, UserRole
from exam_portal.schemas.common import Message
from exam_portal.schemas.user import Student, StudentCreate, StudentUpdate

router = APIRouter()


def _get_student(db: Session, student_id: int) -> User:
    student = (
        db.query(User)
        .filter(User.id == student_id, User.role == UserRole.STUDENT)
        .first()
    )
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


def _ensure_email_free(db: Session, email: str, exclude_id: int = None) -> None:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")


@router.get("", response_model=List[Student])
def list_students(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return (
        db.query(User)
        .filter(User.role == UserRole.STUDENT)
        .order_by(User.registration_date.desc(), User.id.desc())
        .all()
    )


@router.post("", response_model=Student, status_code=status.HTTP_201_CREATED)
def create_student(
    student_in: StudentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    email = student_in.email.lower().strip()
    _ensure_email_free(db, email)

    student = User(
        name=student_in.name.strip(),
        email=email,
        hashed_password=get_password_hash(student_in.password),
        role=UserRole.STUDENT,
        phone=student_in.phone.strip(),
        college=student_in.college.strip(),
        group_name=student_in.group.strip(),
        account_status=student_in.account_status,
        is_active=student_in.account_status == "Active",
    )
    if student_in.registration_date:
        student.registration_date = student_in.registration_date
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return _get_student(db, student_id)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: int,
    student_in: StudentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    student = _get_student(db, student_id)
    email = student_in.email.lower().strip()
    _ensure_email_free(db, email, exclude_id=student.id)

    student.name = student_in.name.strip()
    student.email = email
    student.phone = student_in.phone
    student.college = student_in.college
    student.group_name = student_in.group
    student.account_status = student_in.account_status or "Active"
    student.is_active = student.account_status == "Active"
    db.commit()
    db.refresh(student)
    return student


@router.delete("/{student_id}", response_model=Message)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    student = _get_student(db, student_id)
    db.delete(student)
    db.commit()
    return {"message": "Student deleted successfully"}
