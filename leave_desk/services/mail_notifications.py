from __future__ import annotations

from datetime import datetime, timezone
import html

from sqlalchemy.orm import Session

from ..core.config import Settings
from ..models.user import User
from .mail_service import MailPayload, send_mail


def reset_link(settings: Settings, raw_token: str) -> str:
    base = settings.frontend_url.rstrip("/")
    return f"{base}/reset-password/{raw_token}"


def _esc(value: str | None) -> str:
    return html.escape(value or "-")


def _render_plain(*, name: str, link_url: str, expires_min: int) -> str:
    lines: list[str] = []
    lines.append(f"Hello {name},")
    lines.append("")
    lines.append("We received a request to reset the password of your Faculty Leave Desk account.")
    lines.append(f"Open the link below within {expires_min} minutes to choose a new password:")
    lines.append("")
    lines.append(link_url)
    lines.append("")
    lines.append("If you did not ask for this, you can ignore this email.")
    return "\n".join(lines)


def _render_html(*, name: str, link_url: str, expires_min: int) -> str:
    return (
        "<div style=\"font-family:Arial,sans-serif;font-size:14px;color:#111827;\">"
        f"<p>Hello {_esc(name)},</p>"
        "<p>We received a request to reset the password of your Faculty Leave Desk account.</p>"
        f"<p>This link expires in {expires_min} minutes.</p>"
        f"<p><a href=\"{_esc(link_url)}\" style=\"display:inline-block;padding:10px 16px;"
        "border-radius:6px;background:#1d4ed8;color:#ffffff;text-decoration:none;font-weight:600;\">"
        "Reset password</a></p>"
        "<p style=\"color:#6b7280;\">If you did not ask for this, you can ignore this email.</p>"
        "</div>"
    )


def notify_password_reset(session: Session, settings: Settings, user: User, raw_token: str) -> str:
    link_url = reset_link(settings, raw_token)
    expires_min = settings.reset_token_expires_min
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    payload = MailPayload(
        event_key=f"password_reset:{user.id}:{stamp}",
        event_type="password_reset",
        subject="[Faculty Leave Desk] Password reset",
        body_text=_render_plain(name=user.full_name, link_url=link_url, expires_min=expires_min),
        body_html=_render_html(name=user.full_name, link_url=link_url, expires_min=expires_min),
        recipient_email=user.email,
    )
    return send_mail(session, settings, payload)
