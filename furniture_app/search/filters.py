"""Request-scoped search criteria for ads and users.

Every field is optional; ``None`` (or a blank string) means "do not filter
on this". Paging and sorting getters never raise: out-of-range values fall
back to the defaults below.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..models.ad import Condition


DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_BY = "id"


class SortDirection(str, enum.Enum):
    ASC  = "ASC"
    DESC = "DESC"


def parse_sort_direction(value: Optional[str]) -> SortDirection:
    """Case-insensitive "asc"/"desc"; anything else is ascending."""
    if value is None:
        return SortDirection.ASC
    try:
        return SortDirection(value.strip().upper())
    except ValueError:
        return SortDirection.ASC


@dataclass(frozen=True)
class Pageable:
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT_BY
    direction: SortDirection = SortDirection.ASC

    @property
    def offset(self) -> int:
        return self.page * self.size


class GenericFilters(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: Optional[int] = None
    page_size: Optional[int] = None
    sort_by: Optional[str] = None
    sort_direction: Optional[str] = None

    def get_page(self) -> int:
        return max(self.page, 0) if self.page is not None else DEFAULT_PAGE

    def get_page_size(self) -> int:
        if self.page_size is not None and self.page_size > 0:
            return self.page_size
        return DEFAULT_PAGE_SIZE

    def get_sort_by(self) -> str:
        if self.sort_by and self.sort_by.strip():
            return self.sort_by.strip()
        return DEFAULT_SORT_BY

    def get_sort_direction(self) -> SortDirection:
        return parse_sort_direction(self.sort_direction)

    def get_pageable(self) -> Pageable:
        return Pageable(
            page=self.get_page(),
            size=self.get_page_size(),
            sort_by=self.get_sort_by(),
            direction=self.get_sort_direction(),
        )


class AdFilters(GenericFilters):
    title: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    condition: Optional[Condition] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    city_id: Optional[int] = None
    city_name: Optional[str] = None
    user_id: Optional[int] = None
    is_available: Optional[bool] = None
    description: Optional[str] = None
    my_ads: Optional[bool] = None

    @field_validator("condition", mode="before")
    @classmethod
    def _normalize_condition(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or None
        return value


class UserFilters(GenericFilters):
    email: Optional[str] = None
    is_active: Optional[bool] = None
