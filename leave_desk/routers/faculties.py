import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..core.current_user import get_current_admin, get_current_user
from ..core.errors import NotFoundError, ValidationError
from ..db import get_session
from ..models.leave import Leave
from ..models.user import User
from ..schemas.user import UserOut
from ..services import faculty_load

logger = logging.getLogger(__name__)

router = APIRouter(tags=["faculties"])


def _has_subject(user: User, subject: str) -> bool:
    return subject in {(s or "").strip().lower() for s in (user.subjects or [])}


@router.get("/faculties")
def list_faculties(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
    department: str | None = Query(default=None),
    gender: str | None = Query(default=None),
    subject: str | None = Query(default=None),
):
    stmt = select(User)
    if department:
        stmt = stmt.where(func.lower(User.department) == department.strip().lower())
    if gender:
        stmt = stmt.where(func.lower(User.gender) == gender.strip().lower())
    stmt = stmt.order_by(User.full_name.asc(), User.id.asc())

    faculties = list(session.scalars(stmt).all())
    if subject:
        # subjects is a JSON list, matched here to stay portable across databases
        wanted = subject.strip().lower()
        faculties = [f for f in faculties if _has_subject(f, wanted)]

    if not faculties:
        raise NotFoundError("No faculties found")
    return {
        "success": True,
        "count": len(faculties),
        "faculties": [UserOut.model_validate(f) for f in faculties],
    }


@router.delete("/faculty/{faculty_id}")
def delete_faculty(
    faculty_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(get_current_admin),
):
    faculty = session.get(User, faculty_id)
    if not faculty:
        raise NotFoundError("Faculty not found.")
    deleted = {"id": faculty.id, "fullName": faculty.full_name, "email": faculty.email}

    session.execute(delete(Leave).where(Leave.user_id == faculty_id))
    session.delete(faculty)
    session.commit()
    logger.info("Faculty deleted: id=%s by=%s", faculty_id, admin.id)
    return {"success": True, "message": "Faculty deleted successfully.", "deletedFaculty": deleted}


@router.get("/faculty-load", response_class=HTMLResponse)
async def get_faculty_load(
    school: str | None = Query(default=None),
    department: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
):
    if not school or not department:
        raise ValidationError("school and department are required")
    page = await faculty_load.fetch_faculty_load(settings, school, department)
    return HTMLResponse(content=page)
