"""
Authentication endpoints for user registration and login.
"""
from datetime import timedelta
from typing import Any

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.dependencies import get_current_user
from exam_portal.core.security import create_access_token, get_password_hash, verify_password
from exam_portal.db.base import get_db
from exam_portal.models.user import User, UserRole
from exam_portal.schemas.common import Message
from exam_portal.schemas.user import ProfileUpdate, Student, Token, User as UserSchema, UserCreate
from exam_portal.services.mail import mail_service

router = APIRouter()


def _issue_token(response: Response, user: User) -> str:
    """Create an access token and set it as the http-only auth cookie."""
    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(subject=user.id, expires_delta=expires, extra_claims={"role": user.role})
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        max_age=int(expires.total_seconds()),
        path="/",
    )
    return token


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register(
    user_in: UserCreate,
    response: Response,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> Any:
    """
    Register a new student account and sign it in.

    Raises:
        HTTPException: If the email is already registered
    """
    email = user_in.email.lower().strip()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )

    user = User(
        name=user_in.name.strip(),
        email=email,
        hashed_password=get_password_hash(user_in.password),
        role=UserRole.STUDENT,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _issue_token(response, user)
    mail_service.send_message_background(
        background_tasks,
        subject=f"Welcome to {settings.PROJECT_NAME}",
        recipients=[user.email],
        template_name="welcome.html",
        context={"name": user.name, "email": user.email, "project_name": settings.PROJECT_NAME},
    )
    return user


@router.post("/login", response_model=Token)
def login(
    response: Response,
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends(),
) -> Any:
    """
    Login with email and password; returns a JWT and sets the auth cookie.

    Raises:
        HTTPException: If credentials are invalid or the account is inactive
    """
    user = db.query(User).filter(User.email == form_data.username.lower().strip()).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token = _issue_token(response, user)
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": user,
    }


@router.post("/logout", response_model=Message)
def logout(response: Response) -> Any:
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserSchema)
def read_current_user(current_user: User = Depends(get_current_user)) -> Any:
    """Current identity, freshly loaded from the database."""
    return current_user


@router.patch("/me", response_model=Student)
def update_current_user(
    profile_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Edit the caller's own profile.

    ## Request Body
    Any of `name`, `email`, `phone`, `college`, `group`, `photo`.

    Raises:
        HTTPException: If nothing editable was sent, name or email is blank,
            the email is malformed or taken by another account
    """
    updates = {k: v for k, v in profile_in.model_dump(exclude_unset=True).items() if v is not None}
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No valid fields to update")

    if "name" in updates:
        updates["name"] = updates["name"].strip()
        if not updates["name"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty")

    if "email" in updates:
        email = updates["email"].strip()
        if not email:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email cannot be empty")
        try:
            email = validate_email(email, check_deliverability=False).normalized.lower()
        except EmailNotValidError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        taken = db.query(User).filter(User.email == email, User.id != current_user.id).first()
        if taken:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use by another account",
            )
        updates["email"] = email

    if "group" in updates:
        updates["group_name"] = updates.pop("group")

    for field, value in updates.items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user
