"""Composable WHERE-clause builders for ad and user searches.

Each builder maps one optional criterion to a SQLAlchemy boolean clause and
returns ``match_all()`` when the criterion is absent, so a search is simply
the conjunction of every builder's output. Relation criteria are EXISTS
subqueries (``has()``), never joins.
"""
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from ..models.ad import Ad, Condition
from ..models.static_data import Category, City
from ..models.user import User
from .filters import AdFilters, UserFilters


def match_all() -> ColumnElement[bool]:
    return true()


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def conjunction(*predicates: ColumnElement[bool]) -> ColumnElement[bool]:
    return and_(match_all(), *predicates)


# ---------- Ads ----------

def ad_title_like(title: Optional[str]) -> ColumnElement[bool]:
    if _blank(title):
        return match_all()
    return Ad.title.icontains(title.strip(), autoescape=True)


def ad_description_like(description: Optional[str]) -> ColumnElement[bool]:
    if _blank(description):
        return match_all()
    return Ad.description.icontains(description.strip(), autoescape=True)


def ad_category_is(category_id: Optional[int]) -> ColumnElement[bool]:
    if category_id is None:
        return match_all()
    return Ad.category_id == category_id


def ad_category_name_like(category_name: Optional[str]) -> ColumnElement[bool]:
    if _blank(category_name):
        return match_all()
    return Ad.category.has(Category.name.icontains(category_name.strip(), autoescape=True))


def ad_condition_is(condition: Optional[Condition]) -> ColumnElement[bool]:
    if condition is None:
        return match_all()
    return Ad.condition == condition


def ad_price_between(min_price: Optional[Decimal], max_price: Optional[Decimal]) -> ColumnElement[bool]:
    """Inclusive on both ends; a missing bound leaves that side open."""
    if min_price is None and max_price is None:
        return match_all()
    if min_price is not None and max_price is not None:
        return Ad.price.between(min_price, max_price)
    if min_price is not None:
        return Ad.price >= min_price
    return Ad.price <= max_price


def ad_city_is(city_id: Optional[int]) -> ColumnElement[bool]:
    if city_id is None:
        return match_all()
    return Ad.city_id == city_id


def ad_city_name_like(city_name: Optional[str]) -> ColumnElement[bool]:
    if _blank(city_name):
        return match_all()
    return Ad.city.has(City.name.icontains(city_name.strip(), autoescape=True))


def ad_user_is(user_id: Optional[int]) -> ColumnElement[bool]:
    if user_id is None:
        return match_all()
    return Ad.user_id == user_id


def ad_is_available(is_available: Optional[bool]) -> ColumnElement[bool]:
    if is_available is None:
        return match_all()
    return Ad.is_available.is_(is_available)


def ad_is_my_ads(my_ads: Optional[bool], current_user_id: Optional[int]) -> ColumnElement[bool]:
    # only narrows when the flag is set AND we know who is asking
    if not my_ads or current_user_id is None:
        return match_all()
    return Ad.user_id == current_user_id


def ad_specs_from_filters(filters: AdFilters, current_user_id: Optional[int] = None) -> List[ColumnElement[bool]]:
    return [
        ad_title_like(filters.title),
        ad_description_like(filters.description),
        ad_category_is(filters.category_id),
        ad_category_name_like(filters.category_name),
        ad_condition_is(filters.condition),
        ad_price_between(filters.min_price, filters.max_price),
        ad_city_is(filters.city_id),
        ad_city_name_like(filters.city_name),
        ad_user_is(filters.user_id),
        ad_is_available(filters.is_available),
        ad_is_my_ads(filters.my_ads, current_user_id),
    ]


# ---------- Users ----------

def user_email_is(email: Optional[str]) -> ColumnElement[bool]:
    if _blank(email):
        return match_all()
    return User.email == email


def user_is_active(is_active: Optional[bool]) -> ColumnElement[bool]:
    if is_active is None:
        return match_all()
    return User.is_active.is_(is_active)


def user_specs_from_filters(filters: UserFilters) -> List[ColumnElement[bool]]:
    return [
        user_email_is(filters.email),
        user_is_active(filters.is_active),
    ]
