import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from sqlalchemy.orm import Session

from ..db import get_session
from ..models.user import User
from .config import Settings, get_settings
from .errors import AuthError
from .roles import require_admin
from .security import TOKEN_COOKIE, decode_token

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    # cookie wins over the Authorization header
    token = request.cookies.get(TOKEN_COOKIE) or (creds.credentials if creds else None)
    if not token:
        raise AuthError("Please login")

    try:
        payload = decode_token(token, settings)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise AuthError("Invalid or expired token. Please log in")

    user = session.get(User, user_id)
    if not user:
        logger.info("Token for missing user id=%s rejected", user_id)
        raise AuthError("Invalid or expired token. Please log in")
    return user


def get_current_admin(
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> User:
    require_admin(user, settings)
    return user
