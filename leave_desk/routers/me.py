from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..core.current_user import get_current_user
from ..core.roles import is_admin
from ..db import get_session
from ..models.user import User
from ..schemas.auth import ChangePasswordIn
from ..schemas.user import ProfileUpdateIn, UserOut
from ..services import auth_service

router = APIRouter(prefix="/user", tags=["me"])


@router.get("")
def me(user: User = Depends(get_current_user), settings: Settings = Depends(get_settings)):
    return {
        "success": True,
        "user": UserOut.model_validate(user),
        "isAdmin": is_admin(user, settings),
    }


@router.patch("")
def update_me(
    payload: ProfileUpdateIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.update_profile(session, settings, user, payload)
    return {"success": True, "message": "Profile updated", "user": UserOut.model_validate(user)}


@router.post("/change-password")
def change_password(
    payload: ChangePasswordIn,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
):
    auth_service.change_password(session, user, payload.current_password, payload.new_password)
    return {"success": True, "message": "Password changed successfully"}
