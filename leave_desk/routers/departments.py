import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from ..core.current_user import get_current_admin
from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..db import get_session
from ..models.department import Department
from ..models.user import User
from ..schemas.department import (
    DepartmentCreateIn,
    DepartmentOut,
    DepartmentUpdateIn,
    DepartmentWithCountOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/departments", tags=["departments"])


def _code_taken(session: Session, code: str, exclude_id: int | None = None) -> bool:
    stmt = select(Department.id).where(Department.code == code)
    if exclude_id is not None:
        stmt = stmt.where(Department.id != exclude_id)
    return session.scalar(stmt.limit(1)) is not None


@router.get("")
def list_departments(session: Session = Depends(get_session)):
    # users store the code in lowercase, departments in uppercase
    stmt = (
        select(Department, func.count(User.id).label("employees"))
        .outerjoin(User, func.lower(User.department) == func.lower(Department.code))
        .group_by(Department.id)
        .order_by(Department.name.asc(), Department.id.asc())
    )
    departments = [
        DepartmentWithCountOut(
            id=dept.id,
            name=dept.name,
            code=dept.code,
            created_at=dept.created_at,
            employees=employees,
        )
        for dept, employees in session.execute(stmt).all()
    ]
    return {"success": True, "departments": departments}


@router.post("", status_code=201)
def create_department(
    payload: DepartmentCreateIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    name = (payload.name or "").strip()
    code = (payload.code or "").strip().upper()
    if not name or not code:
        raise ValidationError("Name & code required")
    if _code_taken(session, code):
        raise ConflictError("Department code already exists")

    dept = Department(name=name, code=code)
    session.add(dept)
    session.commit()
    session.refresh(dept)
    logger.info("Department created: id=%s code=%s by=%s", dept.id, dept.code, admin.id)
    return {"success": True, "department": DepartmentOut.model_validate(dept)}


@router.put("/{department_id}")
def update_department(
    department_id: int,
    payload: DepartmentUpdateIn,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    dept = session.get(Department, department_id)
    if not dept:
        raise NotFoundError("Department not found")

    if payload.name and payload.name.strip():
        dept.name = payload.name.strip()
    if payload.code and payload.code.strip():
        code = payload.code.strip().upper()
        if _code_taken(session, code, exclude_id=dept.id):
            raise ConflictError("Department code already exists")
        dept.code = code

    session.commit()
    session.refresh(dept)
    return {"success": True, "department": DepartmentOut.model_validate(dept)}


@router.delete("/{department_id}")
def delete_department(
    department_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    dept = session.get(Department, department_id)
    if not dept:
        raise NotFoundError("Department not found")
    out = DepartmentOut.model_validate(dept)
    session.delete(dept)
    session.commit()
    logger.info("Department deleted: id=%s by=%s", department_id, admin.id)
    return {"success": True, "message": "Department deleted", "department": out}
