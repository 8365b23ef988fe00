# furniture_app/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .db import get_db
from .errors import NotAuthorizedError
from .models.user import User
from .services.files import FileStorage
from .services.users import find_by_username
from .utils.security import decode_jwt

bearer_scheme = HTTPBearer(auto_error=False)


# ------------------ File storage ------------------

def get_file_storage() -> FileStorage:
    return FileStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


# ------------------ Bearer token ------------------

def _user_from_credentials(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[User]:
    if credentials is None or not credentials.credentials:
        return None
    payload = decode_jwt(credentials.credentials)
    if not payload or not payload.get("sub"):
        return None
    u = find_by_username(db, payload["sub"])
    if u is None or not u.is_active:
        return None
    return u


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    u = _user_from_credentials(db, credentials)
    if u is None:
        raise NotAuthorizedError("User", "User must authenticate")
    return u


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    # anonymous callers are fine; a bad token is treated as anonymous too
    return _user_from_credentials(db, credentials)
