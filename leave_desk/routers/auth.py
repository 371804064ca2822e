from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..core.roles import is_admin
from ..core.security import TOKEN_COOKIE, cookie_options, create_access_token
from ..db import get_session
from ..models.user import User
from ..schemas.auth import ForgotPasswordIn, LoginIn, ResetPasswordIn, SignupIn
from ..schemas.user import UserOut
from ..services import auth_service

router = APIRouter(tags=["auth"])

RESET_REQUESTED = "If an account exists for that email, a reset link has been sent"


def issue_session_cookie(response: Response, user: User, settings: Settings) -> str:
    token = create_access_token(str(user.id), settings)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=settings.jwt_expires_days * 24 * 60 * 60,
        **cookie_options(settings),
    )
    return token


@router.post("/signup", status_code=201)
def signup(
    payload: SignupIn,
    response: Response,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.register(session, settings, payload)
    token = issue_session_cookie(response, user, settings)
    return {
        "success": True,
        "message": "User registered successfully",
        "user": UserOut.model_validate(user),
        "token": token,
    }


@router.post("/login")
def login(
    payload: LoginIn,
    response: Response,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.authenticate(session, settings, payload.email, payload.password, payload.role)
    token = issue_session_cookie(response, user, settings)
    return {
        "success": True,
        "message": "Login successful",
        "user": UserOut.model_validate(user),
        "isAdmin": is_admin(user, settings),
        "token": token,
    }


@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    # tokens are not revoked server-side; the client just loses its cookie
    response.delete_cookie(TOKEN_COOKIE, **cookie_options(settings))
    return {"success": True, "message": "Logout successful"}


@router.post("/forgot-password")
def forgot_password(
    payload: ForgotPasswordIn,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    auth_service.request_password_reset(session, settings, payload.email)
    return {"success": True, "message": RESET_REQUESTED}


@router.post("/reset-password/{token}")
def reset_password(
    token: str,
    payload: ResetPasswordIn,
    session: Session = Depends(get_session),
):
    auth_service.reset_password(session, token, payload.password)
    return {"success": True, "message": "Password reset successful"}
