# furniture_app/admin/security.py
from fastapi import Depends

from ..deps import get_current_user
from ..errors import ForbiddenError
from ..models.user import Role, User


def is_admin_user(user) -> bool:
    return getattr(user, "role", None) == Role.ADMIN


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not is_admin_user(user):
        raise ForbiddenError("User", "Admin access required")
    return user


def ensure_owner_or_admin(user: User, owner_id: int) -> None:
    if user.id != owner_id and not is_admin_user(user):
        raise ForbiddenError("Ad", "Only the owner or an administrator can change this ad")
