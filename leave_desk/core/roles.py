from ..models.user import User
from .config import Settings
from .errors import ForbiddenError


def is_admin_email(email: str | None, settings: Settings) -> bool:
    admin_email = (settings.admin_email or "").strip().lower()
    if not admin_email:
        return False
    return (email or "").strip().lower() == admin_email


def is_admin(user: User, settings: Settings) -> bool:
    # role is derived from identity + configuration on every call, never stored
    return is_admin_email(user.email, settings)


def require_admin(user: User, settings: Settings) -> None:
    if not is_admin(user, settings):
        raise ForbiddenError("Admin access required")
