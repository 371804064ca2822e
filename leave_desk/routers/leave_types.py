import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.current_user import get_current_admin
from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..db import get_session
from ..models.leave import Leave
from ..models.leave_type import LeaveType
from ..models.user import User
from ..schemas.leave_type import LeaveTypeCreateIn, LeaveTypeOut, LeaveTypeUpdateIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leave-types", tags=["leave-types"])


def _name_taken(session: Session, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(LeaveType.id).where(LeaveType.name == name)
    if exclude_id is not None:
        stmt = stmt.where(LeaveType.id != exclude_id)
    return session.scalar(stmt.limit(1)) is not None


@router.get("")
def list_leave_types(session: Session = Depends(get_session)):
    stmt = select(LeaveType).order_by(LeaveType.name.asc())
    leave_types = [LeaveTypeOut.model_validate(lt) for lt in session.scalars(stmt).all()]
    return {"success": True, "leaveTypes": leave_types}


@router.post("", status_code=201)
def create_leave_type(
    payload: LeaveTypeCreateIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    name = (payload.name or "").strip()
    if not name or not payload.max_days:
        raise ValidationError("Name & maxDays are required")
    if _name_taken(session, name):
        raise ConflictError("Leave type already exists")

    leave_type = LeaveType(
        name=name,
        description=payload.description,
        max_days=payload.max_days,
        requires_attachment=payload.requires_attachment,
        applications=0,
    )
    session.add(leave_type)
    session.commit()
    session.refresh(leave_type)
    logger.info("Leave type created: id=%s name=%s by=%s", leave_type.id, leave_type.name, admin.id)
    return {"success": True, "leaveType": LeaveTypeOut.model_validate(leave_type)}


@router.put("/{leave_type_id}")
def update_leave_type(
    leave_type_id: int,
    payload: LeaveTypeUpdateIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    leave_type = session.get(LeaveType, leave_type_id)
    if not leave_type:
        raise NotFoundError("Leave type not found")

    if payload.name and payload.name.strip():
        name = payload.name.strip()
        if _name_taken(session, name, exclude_id=leave_type.id):
            raise ConflictError("Leave type already exists")
        leave_type.name = name
    if payload.description:
        leave_type.description = payload.description
    if payload.max_days:
        leave_type.max_days = payload.max_days
    if payload.requires_attachment is not None:
        leave_type.requires_attachment = payload.requires_attachment

    session.commit()
    session.refresh(leave_type)
    return {"success": True, "leaveType": LeaveTypeOut.model_validate(leave_type)}


@router.delete("/{leave_type_id}")
def delete_leave_type(
    leave_type_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    leave_type = session.get(LeaveType, leave_type_id)
    if not leave_type:
        raise NotFoundError("Leave type not found")
    out = LeaveTypeOut.model_validate(leave_type)

    # existing applications outlive their type
    session.execute(
        update(Leave).where(Leave.leave_type_id == leave_type_id).values(leave_type_id=None)
    )
    session.delete(leave_type)
    session.commit()
    logger.info("Leave type deleted: id=%s by=%s", leave_type_id, admin.id)
    return {"success": True, "message": "Leave type deleted", "leaveType": out}
