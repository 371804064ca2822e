"""Credential store: signup, login, password change and the reset-token flow."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import Settings
from ..core.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from ..core.roles import is_admin
from ..core.security import hash_password, hash_reset_token, new_reset_token, verify_password
from ..models.user import User
from ..schemas.auth import SignupIn
from ..schemas.user import ProfileUpdateIn
from .mail_notifications import notify_password_reset

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
INVALID_CREDENTIALS = "Invalid credentials"
INVALID_RESET_TOKEN = "Invalid or expired token"


def _check_department(settings: Settings, department: str) -> None:
    codes = settings.department_codes
    if department not in codes:
        raise ValidationError(f"Department must be one of: {', '.join(codes)}")


def find_by_email(session: Session, email: str) -> User | None:
    return session.scalar(select(User).where(User.email == email.strip().lower()))


def register(session: Session, settings: Settings, payload: SignupIn) -> User:
    _check_department(settings, payload.department)
    if find_by_email(session, payload.email):
        raise ConflictError("Email already registered")

    user = User(
        email=payload.email,
        password_hash=hash_password(payload.password),
        full_name=payload.full_name,
        phone_no=payload.phone_no,
        age=payload.age,
        gender=payload.gender,
        department=payload.department,
        subjects=payload.subjects,
        photo_url=payload.photo_url,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("User registered: id=%s department=%s", user.id, user.department)
    return user


def authenticate(session: Session, settings: Settings, email: str, password: str, role: str | None = None) -> User:
    user = find_by_email(session, email)
    # unknown email and wrong password answer identically
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login failed for %s", email)
        raise AuthError(INVALID_CREDENTIALS)

    if role == ROLE_ADMIN and not is_admin(user, settings):
        logger.info("Admin login refused for user id=%s", user.id)
        raise ForbiddenError("You are not authorized as admin")

    logger.info("Login succeeded: id=%s role=%s", user.id, role or "faculty")
    return user


def update_profile(session: Session, settings: Settings, user: User, payload: ProfileUpdateIn) -> User:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "department" in changes:
        _check_department(settings, changes["department"])
    for field, value in changes.items():
        setattr(user, field, value)
    session.commit()
    session.refresh(user)
    return user


def change_password(session: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise AuthError("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    session.commit()
    logger.info("Password changed: id=%s", user.id)


def request_password_reset(session: Session, settings: Settings, email: str) -> None:
    """Store a reset digest and mail the raw token; silent for unknown emails.

    The token is committed before the mail goes out, so a delivery failure
    leaves it valid until it expires.
    """
    user = find_by_email(session, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return

    raw_token, digest = new_reset_token()
    user.reset_password_token = digest
    user.reset_password_expires = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_expires_min)
    session.commit()
    logger.info("Password reset token issued: id=%s", user.id)

    notify_password_reset(session, settings, user, raw_token)


def reset_password(session: Session, raw_token: str, new_password: str) -> User:
    now = datetime.now(timezone.utc)
    user = session.scalar(
        select(User)
        .where(User.reset_password_token == hash_reset_token(raw_token))
        .where(User.reset_password_expires > now)
    )
    if not user:
        raise AuthError(INVALID_RESET_TOKEN)

    user.password_hash = hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    session.commit()
    logger.info("Password reset completed: id=%s", user.id)
    return user
