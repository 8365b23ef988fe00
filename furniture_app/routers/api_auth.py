from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import AuthRequest, AuthResponse, UserInsert, UserRead
from ..services import auth as auth_service
from ..services import users as user_service
from ..validation import ensure_valid, parse_payload, validate_auth_request, validate_user_insert

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
def login(payload: dict = Body(...), db: Session = Depends(get_db)):
    ensure_valid("Auth", validate_auth_request(payload))
    return auth_service.authenticate(db, parse_payload("Auth", AuthRequest, payload))


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: dict = Body(...), db: Session = Depends(get_db)):
    ensure_valid("User", validate_user_insert(payload))
    return user_service.register_user(db, parse_payload("User", UserInsert, payload))
