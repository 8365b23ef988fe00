from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from ..errors import NotAuthorizedError
from ..schemas import AuthRequest, AuthResponse
from ..utils.security import create_jwt, verify_password
from .users import find_by_username

logger = logging.getLogger(__name__)


def authenticate(db: Session, request: AuthRequest) -> AuthResponse:
    u = find_by_username(db, request.username)
    # same answer for unknown user, wrong password and disabled account
    if u is None or not verify_password(request.password, u.password) or not u.is_active:
        logger.warning("Failed login for %s", request.username)
        raise NotAuthorizedError("User", "User not authorized")

    token = create_jwt({"sub": u.username, "role": u.role.value})
    return AuthResponse(firstname=u.first_name, lastname=u.last_name, token=token, role=u.role.value)
