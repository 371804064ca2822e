from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.current_user import get_current_admin, get_current_user
from ..db import get_session
from ..models.leave import Leave
from ..models.leave_type import LeaveType
from ..models.user import User
from ..schemas.leave import (
    LeaveApplyIn,
    LeaveCountsOut,
    LeaveOut,
    LeaveStatusIn,
    RemainingBalanceOut,
)
from ..schemas.leave_type import LeaveTypeBrief
from ..schemas.user import UserBrief
from ..services import leave_service

router = APIRouter(prefix="/leaves", tags=["leaves"])


def serialize_leave(leave: Leave, leave_type: LeaveType | None = None, owner: User | None = None) -> LeaveOut:
    out = LeaveOut.model_validate(leave)
    if leave_type is not None:
        out.leave_type = LeaveTypeBrief.model_validate(leave_type)
    if owner is not None:
        out.user = UserBrief.model_validate(owner)
    return out


@router.post("/apply", status_code=201)
def apply_leave(
    payload: LeaveApplyIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    leave, leave_type = leave_service.apply_leave(
        session,
        user,
        leave_type_id=payload.leave_type_id,
        from_date=payload.from_date,
        to_date=payload.to_date,
        reason=payload.reason,
        attachment_url=payload.attachment_url,
    )
    return {
        "success": True,
        "message": "Leave applied successfully",
        "leave": serialize_leave(leave, leave_type),
    }


@router.get("/my")
def my_leaves(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    rows = leave_service.list_user_leaves(session, user)
    leaves = [serialize_leave(leave, leave_type) for leave, leave_type in rows]
    return {"success": True, "count": len(leaves), "leaves": leaves}


@router.get("/my/counts")
def my_leave_counts(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    counts = LeaveCountsOut(**leave_service.leave_counts(session, user))
    return {"success": True, "counts": counts}


@router.get("/notifications/pending")
def pending_notifications(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    rows = leave_service.pending_notifications(session, user)
    notifications = [serialize_leave(leave, leave_type) for leave, leave_type in rows]
    return {"success": True, "count": len(notifications), "notifications": notifications}


@router.get("/remaining/{leave_type_id}")
def remaining_balance(
    leave_type_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    balance = RemainingBalanceOut(**leave_service.remaining_balance(session, user, leave_type_id))
    return {"success": True, **balance.model_dump(by_alias=True)}


@router.get("")
def all_leaves(
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    rows = leave_service.list_all_leaves(session)
    leaves = [serialize_leave(leave, leave_type, owner) for leave, leave_type, owner in rows]
    return {"success": True, "count": len(leaves), "leaves": leaves}


@router.put("/{leave_id}/status")
def update_leave_status(
    leave_id: int,
    payload: LeaveStatusIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    leave = leave_service.set_leave_status(session, leave_id, payload.status)
    return {
        "success": True,
        "message": f"Leave {leave.status} successfully",
        "leave": serialize_leave(leave),
    }


@router.put("/{leave_id}/mark-notified")
def mark_notified(
    leave_id: int,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    leave = leave_service.acknowledge_notification(session, user, leave_id)
    return {"success": True, "message": "Notification marked as shown", "leave": serialize_leave(leave)}


@router.delete("/{leave_id}")
def delete_leave(
    leave_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    leave_service.delete_leave(session, leave_id)
    return {"success": True, "message": "Leave deleted successfully"}
