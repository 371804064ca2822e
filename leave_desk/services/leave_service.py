"""Leave application workflow.

A leave starts ``pending`` and an admin moves it once, to ``approved`` or
``rejected``. Every status write clears ``notification_shown``; the owner
sets it again after seeing the decision.

Entitlement is checked per application against the leave type's absolute
``max_days``, not against what the user has left. ``remaining_balance``
reports the latter separately.
"""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select, update, delete, desc, func
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, QuotaError, ValidationError
from ..models.leave import Leave, LEAVE_APPROVED, LEAVE_PENDING, LEAVE_REJECTED
from ..models.leave_type import LeaveType
from ..models.user import User

logger = logging.getLogger(__name__)

DECISION_STATUSES = (LEAVE_APPROVED, LEAVE_REJECTED)
# statuses that consume entitlement
COUNTED_STATUSES = (LEAVE_APPROVED, LEAVE_PENDING)


def count_leave_days(from_date: date, to_date: date) -> int:
    """Inclusive day span: the same day twice is one day."""
    return (to_date - from_date).days + 1


def apply_leave(
    session: Session,
    user: User,
    *,
    leave_type_id: int | None,
    from_date: date | None,
    to_date: date | None,
    reason: str | None,
    attachment_url: str | None = None,
) -> tuple[Leave, LeaveType]:
    if not leave_type_id or not from_date or not to_date or not (reason or "").strip():
        raise ValidationError("All fields are required")

    leave_type = session.get(LeaveType, leave_type_id)
    if not leave_type:
        raise NotFoundError("Invalid leave type")

    if to_date < from_date:
        raise ValidationError("To date cannot be before from date")

    total_days = count_leave_days(from_date, to_date)
    if total_days > leave_type.max_days:
        raise QuotaError(f"You cannot apply more than {leave_type.max_days} days for {leave_type.name}")

    leave = Leave(
        user_id=user.id,
        leave_type_id=leave_type.id,
        from_date=from_date,
        to_date=to_date,
        total_days=total_days,
        reason=reason.strip(),
        attachment_url=attachment_url,
        status=LEAVE_PENDING,
        notification_shown=False,
    )
    session.add(leave)
    session.commit()
    session.refresh(leave)

    # separate write; the counter is a usage metric, not part of the balance
    session.execute(
        update(LeaveType)
        .where(LeaveType.id == leave_type.id)
        .values(applications=LeaveType.applications + 1)
    )
    session.commit()
    session.refresh(leave_type)

    logger.info(
        "Leave applied: id=%s user=%s type=%s days=%s",
        leave.id, user.id, leave_type.id, total_days,
    )
    return leave, leave_type


def list_user_leaves(session: Session, user: User) -> list[tuple[Leave, LeaveType | None]]:
    stmt = (
        select(Leave, LeaveType)
        .outerjoin(LeaveType, Leave.leave_type_id == LeaveType.id)
        .where(Leave.user_id == user.id)
        .order_by(desc(Leave.created_at), desc(Leave.id))
    )
    return [(leave, leave_type) for leave, leave_type in session.execute(stmt).all()]


def list_all_leaves(session: Session) -> list[tuple[Leave, LeaveType | None, User]]:
    stmt = (
        select(Leave, LeaveType, User)
        .join(User, Leave.user_id == User.id)
        .outerjoin(LeaveType, Leave.leave_type_id == LeaveType.id)
        .order_by(desc(Leave.created_at), desc(Leave.id))
    )
    return [(leave, leave_type, owner) for leave, leave_type, owner in session.execute(stmt).all()]


def set_leave_status(session: Session, leave_id: int, status: str | None) -> Leave:
    if status not in DECISION_STATUSES:
        raise ValidationError("Invalid status")

    leave = session.get(Leave, leave_id)
    if not leave:
        raise NotFoundError("Leave not found")
    if leave.status != LEAVE_PENDING:
        raise ValidationError(f"Leave has already been {leave.status}")

    leave.status = status
    leave.notification_shown = False
    session.commit()
    session.refresh(leave)
    logger.info("Leave status changed: id=%s status=%s", leave.id, status)
    return leave


def leave_counts(session: Session, user: User) -> dict[str, int]:
    stmt = (
        select(Leave.status, func.count(Leave.id))
        .where(Leave.user_id == user.id)
        .group_by(Leave.status)
    )
    counts = {LEAVE_PENDING: 0, LEAVE_APPROVED: 0, LEAVE_REJECTED: 0}
    for status, count in session.execute(stmt).all():
        counts[status] = count
    return {"total": sum(counts.values()), **counts}


def pending_notifications(session: Session, user: User) -> list[tuple[Leave, LeaveType | None]]:
    stmt = (
        select(Leave, LeaveType)
        .outerjoin(LeaveType, Leave.leave_type_id == LeaveType.id)
        .where(Leave.user_id == user.id)
        .where(Leave.notification_shown.is_(False))
        .where(Leave.status.in_(DECISION_STATUSES))
        .order_by(desc(Leave.updated_at), desc(Leave.id))
    )
    return [(leave, leave_type) for leave, leave_type in session.execute(stmt).all()]


def acknowledge_notification(session: Session, user: User, leave_id: int) -> Leave:
    leave = session.get(Leave, leave_id)
    # another user's leave looks the same as a missing one
    if not leave or leave.user_id != user.id:
        raise NotFoundError("Leave not found")
    if not leave.notification_shown:
        leave.notification_shown = True
        session.commit()
        session.refresh(leave)
    return leave


def remaining_balance(session: Session, user: User, leave_type_id: int) -> dict:
    leave_type = session.get(LeaveType, leave_type_id)
    if not leave_type:
        raise NotFoundError("Leave type not found")

    used_days = session.scalar(
        select(func.coalesce(func.sum(Leave.total_days), 0))
        .where(Leave.user_id == user.id)
        .where(Leave.leave_type_id == leave_type.id)
        .where(Leave.status.in_(COUNTED_STATUSES))
    ) or 0
    return {
        "leave_type": leave_type.name,
        "max_days": leave_type.max_days,
        "used_days": int(used_days),
        "remaining_days": max(0, leave_type.max_days - int(used_days)),
    }


def delete_leave(session: Session, leave_id: int) -> None:
    result = session.execute(delete(Leave).where(Leave.id == leave_id))
    if not result.rowcount:
        session.rollback()
        raise NotFoundError("Leave not found")
    # applications counter stays as is
    session.commit()
    logger.info("Leave deleted: id=%s", leave_id)
