"""
Public contact form.
"""
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.db.base import get_db
from exam_portal.models.contact import ContactMessage
from exam_portal.schemas.common import Message
from exam_portal.schemas.dashboard import ContactCreate
from exam_portal.services.mail import mail_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
def submit_contact(
    contact_in: ContactCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> Any:
    """Store the message and notify the contact inbox in the background."""
    contact = ContactMessage(
        name=contact_in.name.strip(),
        email=contact_in.email.lower(),
        message=contact_in.message.strip(),
    )
    db.add(contact)
    db.commit()

    mail_service.send_message_background(
        background_tasks,
        subject=f"New contact message from {contact.name}",
        recipients=[settings.CONTACT_INBOX],
        template_name="contact_notification.html",
        context={"name": contact.name, "email": contact.email, "message": contact.message},
    )
    return {"message": "Message received"}
