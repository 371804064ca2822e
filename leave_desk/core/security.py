from datetime import datetime, timedelta, timezone
import hashlib
import secrets

from passlib.context import CryptContext
import jwt

from .config import Settings

TOKEN_COOKIE = "token"
JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(pw: str) -> str:
    return pwd_context.hash(pw)


def verify_password(pw: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return pwd_context.verify(pw, hashed)
    except ValueError:
        # unknown hash format or a password over the bcrypt limit
        return False


def create_access_token(sub: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.jwt_expires_days)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict:
    return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])


def cookie_options(settings: Settings) -> dict:
    # cross-site frontend in production needs SameSite=None, which browsers only accept with Secure
    if settings.is_production:
        return {"httponly": True, "secure": True, "samesite": "none", "path": "/"}
    return {"httponly": True, "secure": False, "samesite": "lax", "path": "/"}


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_reset_token() -> tuple[str, str]:
    """Return ``(raw_token, digest)``; only the digest is ever persisted."""
    raw = secrets.token_hex(32)
    return raw, hash_reset_token(raw)
