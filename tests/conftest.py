"""
Shared fixtures. The environment is set before exam_portal is imported so
settings pick up the in-memory database and a scratch upload directory.
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MAIL_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="exam-portal-uploads-")

import pytest
from fastapi.testclient import TestClient

from exam_portal.core.config import settings
from exam_portal.core.security import create_access_token, get_password_hash
from exam_portal.db.base import SessionLocal, engine
from exam_portal.main import app
from exam_portal.models import Base
from exam_portal.models.assignment import ExamAssignment
from exam_portal.models.exam import Exam, ExamQuestion
from exam_portal.models.user import User, UserRole
from exam_portal.services import question_bank

API = settings.API_V1_PREFIX
PASSWORD = "secret123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
def _reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_user(db, email, role=UserRole.STUDENT, name=None, is_active=True):
    user = User(
        name=name or email.split("@")[0].title(),
        email=email,
        hashed_password=PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


def make_question(db, text, options=("A", "B", "C"), correct_index=0, category="General"):
    draft = question_bank.validate_question(category, text, list(options), correct_index)
    return question_bank.create_question(db, draft)


def make_exam(db, questions, pass_percentage=50, duration=30, is_active=True, title="Sample Exam"):
    exam = Exam(
        title=title,
        category="General",
        duration=duration,
        pass_percentage=pass_percentage,
        is_active=is_active,
        exam_questions=[
            ExamQuestion(question_id=q.id, position=i) for i, q in enumerate(questions)
        ],
    )
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam


def assign(db, exam, student):
    assignment = ExamAssignment(exam_id=exam.id, student_id=student.id)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


@pytest.fixture
def teacher(db):
    return make_user(db, "teacher@example.com", role=UserRole.TEACHER)


@pytest.fixture
def student(db):
    return make_user(db, "student@example.com")


@pytest.fixture
def other_student(db):
    return make_user(db, "other@example.com")


@pytest.fixture
def teacher_headers(teacher):
    return auth_headers(teacher)


@pytest.fixture
def student_headers(student):
    return auth_headers(student)


@pytest.fixture
def two_questions(db):
    """Q1 correct = option A, Q2 correct = option B."""
    q1 = make_question(db, "What is 2 + 2?", options=("4", "5", "6"), correct_index=0)
    q2 = make_question(db, "Capital of France?", options=("Rome", "Paris", "Berlin"), correct_index=1)
    return q1, q2


@pytest.fixture
def assigned_exam(db, two_questions, student):
    exam = make_exam(db, list(two_questions), pass_percentage=50)
    assign(db, exam, student)
    return exam
