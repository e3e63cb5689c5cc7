"""
Outbound email. Sending is fire-and-forget: failures are logged, never
surfaced to the request that triggered them.
"""
import logging
from pathlib import Path
from typing import Any, List, Optional

from fastapi import BackgroundTasks
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import SecretStr

from exam_portal.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"])
)


def build_connection_config() -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME,
        MAIL_PASSWORD=SecretStr(settings.MAIL_PASSWORD),
        MAIL_FROM=settings.MAIL_FROM,
        MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        USE_CREDENTIALS=settings.USE_CREDENTIALS,
        VALIDATE_CERTS=settings.VALIDATE_CERTS
    )


class MailService:
    def __init__(self, conf: Optional[ConnectionConfig] = None):
        self._conf = conf
        self._fm = None

    def _client(self) -> FastMail:
        if self._fm is None:
            self._fm = FastMail(self._conf or build_connection_config())
        return self._fm

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        return jinja_env.get_template(template_name).render(**context)

    async def _send(self, message: MessageSchema) -> None:
        try:
            await self._client().send_message(message)
            logger.info(f"Mail '{message.subject}' sent to {len(message.recipients)} recipient(s)")
        except Exception as e:
            logger.error(f"Failed to send mail '{message.subject}': {e}")

    def send_message_background(
        self,
        background_tasks: BackgroundTasks,
        subject: str,
        recipients: List[str],
        template_name: str,
        context: dict[str, Any],
    ) -> bool:
        """Queue a templated HTML mail; returns False when mail is disabled."""
        recipients = [r for r in recipients if r]
        if not settings.MAIL_ENABLED or not recipients:
            logger.info(f"Mail disabled or no recipients, skipping '{subject}'")
            return False

        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=self.render(template_name, context),
            subtype=MessageType.html
        )
        background_tasks.add_task(self._send, message)
        return True


mail_service = MailService()
