from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import AlreadyExistsError, NotFoundError, ReferentialIntegrityError
from ..mapper import map_to_user_entity, map_to_user_read
from ..models.ad import Ad
from ..models.user import Role, User
from ..schemas import Paginated, UserInsert, UserRead
from ..search.filters import UserFilters
from ..search.pagination import find_page
from ..search.specifications import conjunction, user_specs_from_filters

logger = logging.getLogger(__name__)


def find_by_id(db: Session, user_id: int) -> User:
    u = db.get(User, user_id)
    if u is None:
        logger.error("User with ID %s not found", user_id)
        raise NotFoundError("User", f"User with id {user_id} not found")
    return u


def find_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def _find_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(db: Session, data: UserInsert) -> UserRead:
    # username first, then email
    if find_by_username(db, data.username) is not None:
        logger.warning("User with username %s already exists", data.username)
        raise AlreadyExistsError("User", f"User with username {data.username} already exists")
    if _find_by_email(db, data.email) is not None:
        logger.error("User with email %s already exists", data.email)
        raise AlreadyExistsError("User", f"User with email {data.email} already exists")

    u = map_to_user_entity(data)
    db.add(u)
    try:
        db.commit()
    except IntegrityError as e:
        # lost a race with a concurrent registration
        db.rollback()
        logger.error("Data integrity violation while registering %s: %s", data.username, e)
        raise AlreadyExistsError("User", "Duplicate user data found") from e
    db.refresh(u)
    logger.info("User %s registered", u.username)
    return map_to_user_read(u)


def delete_user(db: Session, username: str) -> None:
    u = find_by_username(db, username)
    if u is None:
        raise NotFoundError("User", f"User with username: {username} not found")

    owned = db.scalar(select(func.count(Ad.id)).where(Ad.user_id == u.id)) or 0
    if owned:
        logger.warning("Cannot delete user %s - has %s ads", username, owned)
        raise ReferentialIntegrityError("User", "Cannot delete user who has active ads. Please delete their ads first.")

    db.delete(u)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Cannot delete user %s - has active ads", username)
        raise ReferentialIntegrityError("User", "Cannot delete user who has active ads. Please delete their ads first.") from e
    logger.info("User with username %s successfully deleted", username)


def get_paginated_users(db: Session, page: int, size: int) -> Paginated[UserRead]:
    return get_paginated_sorted_users(db, page, size, "id", "asc")


def get_paginated_sorted_users(db: Session, page: int, size: int,
                               sort_by: str, sort_direction: str) -> Paginated[UserRead]:
    logger.info("Fetching paginated users - page: %s, size: %s, sortBy: %s, sortDirection: %s",
                page, size, sort_by, sort_direction)
    filters = UserFilters(page=page, page_size=size, sort_by=sort_by, sort_direction=sort_direction)
    result = find_page(db, select(User), User, filters.get_pageable())
    return Paginated[UserRead].from_page(result.map(map_to_user_read))


def get_users_filtered(db: Session, filters: UserFilters | None) -> List[UserRead]:
    """One page (per the filter's paging fields) of users, as a bare list."""
    filters = filters or UserFilters()
    stmt = select(User).where(conjunction(*user_specs_from_filters(filters)))
    return [map_to_user_read(u) for u in find_page(db, stmt, User, filters.get_pageable()).items]


def update_user_role(db: Session, user_id: int, new_role: Role) -> UserRead:
    logger.info("Updating user role - userId: %s, newRole: %s", user_id, new_role.value)
    u = find_by_id(db, user_id)
    u.role = new_role
    db.commit()
    db.refresh(u)
    logger.info("User with ID %s role successfully updated to %s", user_id, new_role.value)
    return map_to_user_read(u)
