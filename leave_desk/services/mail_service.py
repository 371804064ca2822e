from __future__ import annotations

from dataclasses import dataclass
import logging
import smtplib
from email.message import EmailMessage

from email_validator import validate_email, EmailNotValidError
from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.errors import InternalError
from ..models.mail_log import MailLog

logger = logging.getLogger(__name__)

MAIL_SENT = "sent"
MAIL_FAILED = "failed"
MAIL_SKIPPED = "skipped"


@dataclass
class MailPayload:
    event_key: str
    event_type: str
    subject: str
    body_html: str
    body_text: str
    recipient_email: str


def _is_smtp_ready(settings: Settings) -> bool:
    return bool(settings.smtp_host and settings.smtp_from)


def _validate_email(addr: str) -> str | None:
    if not addr:
        return None
    try:
        return validate_email(addr, check_deliverability=False).normalized
    except EmailNotValidError:
        return None


def _build_message(settings: Settings, payload: MailPayload) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = payload.subject
    msg["From"] = f"Faculty Leave Desk <{settings.smtp_from}>"
    msg["To"] = payload.recipient_email
    msg.set_content(payload.body_text)
    msg.add_alternative(payload.body_html, subtype="html")
    return msg


def _send_message(settings: Settings, payload: MailPayload) -> None:
    msg = _build_message(settings, payload)
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as smtp:
        if settings.smtp_starttls:
            smtp.starttls()
        if settings.smtp_user:
            smtp.login(settings.smtp_user, settings.smtp_password)
        smtp.send_message(msg)


def _record(session: Session, payload: MailPayload, status: str, error_message: str | None = None) -> None:
    session.add(
        MailLog(
            event_key=payload.event_key,
            event_type=payload.event_type,
            recipient_email=payload.recipient_email,
            subject=payload.subject,
            body_text=payload.body_text,
            body_html=payload.body_html,
            status=status,
            error_message=error_message,
        )
    )
    session.commit()


def send_mail(session: Session, settings: Settings, payload: MailPayload) -> str:
    """Deliver one message synchronously and log the outcome.

    Returns the recorded status. Raises ``InternalError`` when the relay
    rejects the message or cannot be reached.
    """
    if not _is_smtp_ready(settings):
        logger.info("SMTP not configured, mail skipped. event_key=%s", payload.event_key)
        _record(session, payload, MAIL_SKIPPED, "SMTP not configured")
        return MAIL_SKIPPED

    normalized = _validate_email(payload.recipient_email)
    if not normalized:
        logger.info("Invalid recipient address, mail skipped: %s", payload.recipient_email)
        _record(session, payload, MAIL_SKIPPED, "Invalid recipient address")
        return MAIL_SKIPPED
    payload.recipient_email = normalized

    try:
        _send_message(settings, payload)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Mail delivery failed: %s", payload.event_key)
        _record(session, payload, MAIL_FAILED, str(exc))
        raise InternalError("Error sending email") from exc

    _record(session, payload, MAIL_SENT)
    logger.info("Mail sent: %s", payload.event_key)
    return MAIL_SENT
