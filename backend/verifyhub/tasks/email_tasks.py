"""
Email delivery tasks
"""
from celery import Task
from verifyhub.core.celery_app import celery_app
from verifyhub.notifications.mailer import SmtpMailer
import structlog

logger = structlog.get_logger()


@celery_app.task(bind=True, max_retries=0)
def send_verification_email_task(self: Task, to_email: str, form_url: str):
    """Send a verification request email; failures are logged, never retried"""
    try:
        SmtpMailer.from_settings().send_verification_request(to_email, form_url)
    except Exception as e:
        logger.exception("verification_email_task_failed", to_email=to_email, error=str(e))
        raise
    return to_email
