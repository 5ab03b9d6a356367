"""
Outbound email delivery.

The identity workflow depends only on the ``Notifier`` protocol. Delivery
failures raise ``NotificationError`` so the caller's transaction rolls back.
"""

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

from onboarding.config import Settings, get_settings
from onboarding.kernel.errors import NotificationError
from onboarding.logging_config import get_logger, mask_email

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    """A rendered email ready to send."""

    to: str
    sender: str
    subject: str
    html: str


class Notifier(Protocol):
    """Anything that can deliver a Notification."""

    async def send(self, notification: Notification) -> None:
        """Deliver the message or raise NotificationError."""


class SmtpNotifier:
    """Delivers email through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @staticmethod
    def _build_message(notification: Notification) -> EmailMessage:
        message = EmailMessage()
        message["To"] = notification.to
        message["From"] = notification.sender
        message["Subject"] = notification.subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(notification.html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(message)

    async def send(self, notification: Notification) -> None:
        message = self._build_message(notification)
        try:
            # smtplib blocks; keep the event loop free
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "Email delivery failed",
                extra={"to": mask_email(notification.to), "subject": notification.subject},
            )
            raise NotificationError("Email could not be delivered. Please try again later.") from exc

        logger.info(
            "Email sent",
            extra={"to": mask_email(notification.to), "subject": notification.subject},
        )


class LoggingNotifier:
    """Development notifier that writes messages to the log instead of sending them."""

    async def send(self, notification: Notification) -> None:
        logger.info(
            "Email (not sent) to=%s subject=%r\n%s",
            notification.to,
            notification.subject,
            notification.html,
        )


def build_notifier(settings: Optional[Settings] = None) -> Notifier:
    """Create the notifier selected by MAIL_BACKEND."""
    settings = settings or get_settings()
    backend = settings.mail_backend.lower()

    if backend == "smtp":
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    if backend == "console":
        return LoggingNotifier()

    raise ValueError(f"Unknown mail backend: {settings.mail_backend}")
