"""Conversions between ORM rows and wire schemas.

Reads are null-safe: a missing relation yields ``None`` fields. Writes
resolve category/city by exact name and fail with ``NotFoundError`` when
the name is unknown.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import NotFoundError
from .models.ad import Ad
from .models.static_data import Category, City
from .models.user import Role, User
from .schemas import AdInsert, AdRead, CategoryRead, CityRead, UserInsert, UserRead
from .utils.security import hash_password


# ---------- lookups ----------

def find_category_by_name(db: Session, name: str) -> Category:
    category = db.execute(select(Category).where(Category.name == name)).scalar_one_or_none()
    if category is None:
        raise NotFoundError("Category", f"Category not found: {name}")
    return category


def find_city_by_name(db: Session, name: str) -> City:
    city = db.execute(select(City).where(City.name == name)).scalar_one_or_none()
    if city is None:
        raise NotFoundError("City", f"City not found: {name}")
    return city


# ---------- entity -> DTO ----------

def map_to_category_read(category: Optional[Category]) -> Optional[CategoryRead]:
    if category is None:
        return None
    return CategoryRead(id=category.id, category=category.name)


def map_to_city_read(city: Optional[City]) -> Optional[CityRead]:
    if city is None:
        return None
    return CityRead(id=city.id, city_name=city.name)


def map_to_ad_read(ad: Ad) -> AdRead:
    owner = ad.user
    return AdRead(
        id=ad.id,
        title=ad.title,
        category=map_to_category_read(ad.category),
        city=map_to_city_read(ad.city),
        condition=ad.condition,
        price=ad.price,
        is_available=ad.is_available,
        description=ad.description,
        image_path=ad.image.file_path if ad.image is not None else None,
        created_at=ad.created_at,
        updated_at=ad.updated_at,
        user_first_name=owner.first_name if owner is not None else None,
        user_last_name=owner.last_name if owner is not None else None,
        user_phone=owner.phone if owner is not None else None,
    )


def map_to_user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        username=user.username,
        firstname=user.first_name,
        lastname=user.last_name,
        email=user.email,
        phone=user.phone,
        role=user.role.value if user.role is not None else None,
        is_active=user.is_active,
    )


# ---------- DTO -> entity ----------

def map_to_ad_entity(db: Session, data: AdInsert) -> Ad:
    """Owner is left unset; the caller binds it."""
    ad = Ad(
        title=data.title,
        condition=data.condition,
        price=data.price,
        is_available=data.is_available,
        description=data.description,
    )
    if data.category_name is not None:
        ad.category = find_category_by_name(db, data.category_name)
    if data.city_name is not None:
        ad.city = find_city_by_name(db, data.city_name)
    return ad


def map_to_user_entity(data: UserInsert) -> User:
    return User(
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        password=hash_password(data.password),
        email=data.email,
        phone=data.phone,
        role=data.role or Role.USER,
        is_active=True,
    )
