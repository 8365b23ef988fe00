from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ..admin.security import require_admin
from ..db import get_db
from ..schemas import Paginated, ResponseMessage, UserRead, UserRoleUpdate
from ..search.filters import UserFilters
from ..services import users as user_service
from ..validation import ensure_valid, parse_payload, validate_role_update

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("/paginated", response_model=Paginated[UserRead])
def get_paginated_users(page: int = Query(0), size: int = Query(10), db: Session = Depends(get_db)):
    return user_service.get_paginated_users(db, page, size)


@router.get("/paginated/sorted", response_model=Paginated[UserRead])
def get_paginated_sorted_users(
    page: int = Query(0),
    size: int = Query(10),
    sort_by: str = Query("id", alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
    db: Session = Depends(get_db),
):
    return user_service.get_paginated_sorted_users(db, page, size, sort_by, sort_direction)


@router.post("/search", response_model=List[UserRead])
def search_users(filters: Optional[UserFilters] = Body(None), db: Session = Depends(get_db)):
    return user_service.get_users_filtered(db, filters)


@router.delete("/{username}", response_model=ResponseMessage)
def delete_user(username: str, db: Session = Depends(get_db)):
    user_service.delete_user(db, username)
    return ResponseMessage(code="SUCCESS", description="User deleted successfully")


@router.put("/{user_id}/role", response_model=UserRead)
def update_user_role(user_id: int, payload: dict = Body(...), db: Session = Depends(get_db)):
    ensure_valid("User", validate_role_update(payload))
    return user_service.update_user_role(db, user_id, parse_payload("User", UserRoleUpdate, payload).role)
