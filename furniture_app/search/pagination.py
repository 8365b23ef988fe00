from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.orm import Session

from ..errors import InvalidArgumentError
from .filters import Pageable, SortDirection

T = TypeVar("T")
R = TypeVar("R")

# never exposed through ordering
UNSORTABLE_COLUMNS = frozenset({"password"})


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 0
    size: int = 10
    total: int = 0

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        return Page(items=[fn(it) for it in self.items], page=self.page, size=self.size, total=self.total)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def resolve_sort_column(model: Any, sort_by: str):
    """Map a client sort field (``createdAt`` or ``created_at``) to a column."""
    columns = inspect(model).columns
    key = _snake(sort_by.strip())
    if key not in columns or key in UNSORTABLE_COLUMNS:
        raise InvalidArgumentError("Sort", f"Cannot sort by '{sort_by}'")
    return getattr(model, key)


def find_page(db: Session, stmt: Select, model: Any, pageable: Pageable) -> Page:
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0

    column = resolve_sort_column(model, pageable.sort_by)
    order = column.desc() if pageable.direction is SortDirection.DESC else column.asc()
    stmt = stmt.order_by(order)
    if column.key != "id":
        # stable order across pages when the sort key repeats
        stmt = stmt.order_by(model.id.asc())

    rows = db.execute(stmt.offset(pageable.offset).limit(pageable.size)).scalars().all()
    return Page(items=list(rows), page=pageable.page, size=pageable.size, total=total)
