"""
Outbound email for verification requests
"""
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Optional

import structlog

from verifyhub.core.config import settings
from verifyhub.core.exceptions import NotificationError

logger = structlog.get_logger()

VERIFICATION_SUBJECT = "Employment Verification Request"


def build_form_url(token: str) -> str:
    return f"{settings.VERIFICATION_FORM_BASE_URL.rstrip('/')}/{token}"


def build_verification_message(to_email: str, form_url: str, ttl_days: int) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = VERIFICATION_SUBJECT
    msg["From"] = settings.SMTP_FROM_EMAIL
    msg["To"] = to_email
    msg.set_content(
        "Please verify employment details by opening the link below:\n\n"
        f"{form_url}\n\n"
        f"This link expires in {ttl_days} days."
    )
    msg.add_alternative(
        "<p>Please verify employment details by clicking below:</p>"
        f'<a href="{form_url}">{form_url}</a>'
        f"<p>This link expires in {ttl_days} days.</p>",
        subtype="html",
    )
    return msg


class Mailer(ABC):
    """Delivers the verification request to the previous employer"""

    @abstractmethod
    def send_verification_request(self, to_email: str, form_url: str) -> None:
        ...


class SmtpMailer(Mailer):
    """Sends inline over SMTP"""

    def __init__(
        self,
        host: Optional[str],
        port: int,
        user: str = None,
        password: str = None,
        use_tls: bool = True,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls

    @classmethod
    def from_settings(cls) -> "SmtpMailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
        )

    def send_verification_request(self, to_email: str, form_url: str) -> None:
        # A missing host fails the send, never construction
        if not self.host:
            logger.error("verification_email_failed", to_email=to_email, error="missing SMTP_HOST")
            raise NotificationError("SMTP is not configured (missing SMTP_HOST)")

        msg = build_verification_message(to_email, form_url, settings.VERIFICATION_TOKEN_TTL_DAYS)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=20) as smtp:
                smtp.ehlo()
                if self.use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("verification_email_failed", to_email=to_email, error=str(e))
            raise NotificationError(details={"to_email": to_email}) from e

        logger.info("verification_email_sent", to_email=to_email)


class CeleryMailer(Mailer):
    """Queues delivery on the Celery worker"""

    def send_verification_request(self, to_email: str, form_url: str) -> None:
        from verifyhub.tasks.email_tasks import send_verification_email_task

        try:
            send_verification_email_task.delay(to_email, form_url)
        except Exception as e:
            logger.error("verification_email_enqueue_failed", to_email=to_email, error=str(e))
            raise NotificationError(details={"to_email": to_email}) from e

        logger.info("verification_email_queued", to_email=to_email)


class ConsoleMailer(Mailer):
    """Development transport: logs the link instead of sending it"""

    def send_verification_request(self, to_email: str, form_url: str) -> None:
        logger.info("verification_email_skipped", to_email=to_email, form_url=form_url)


def get_mailer() -> Mailer:
    """Dependency returning the configured email transport"""
    backend = settings.EMAIL_BACKEND.lower()
    if backend == "smtp":
        return SmtpMailer.from_settings()
    if backend == "console":
        return ConsoleMailer()
    return CeleryMailer()
