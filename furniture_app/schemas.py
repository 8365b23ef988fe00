import math
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field, field_validator
from pydantic.alias_generators import to_camel

from .models.ad import Condition
from .models.user import Role
from .search.pagination import Page

T = TypeVar("T")


class Schema(BaseModel):
    # camelCase on the wire, snake_case in python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------- Static data ----------

class CategoryRead(Schema):
    id: int
    category: str


class CityRead(Schema):
    id: int
    city_name: str


# ---------- Ads ----------

class AdInsert(Schema):
    title: str
    category_name: Optional[str] = None
    city_name: Optional[str] = None
    condition: Condition
    price: Decimal
    is_available: bool
    description: str

    @field_validator("condition", mode="before")
    @classmethod
    def _normalize_condition(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class AdRead(Schema):
    id: int
    title: str
    category: Optional[CategoryRead] = None
    city: Optional[CityRead] = None
    condition: Optional[Condition] = None
    price: Optional[Decimal] = None
    is_available: Optional[bool] = None
    description: Optional[str] = None
    image_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    user_phone: Optional[str] = None


# ---------- Users ----------

class UserInsert(Schema):
    username: str
    password: str
    first_name: str
    last_name: str
    email: str
    phone: str
    role: Role = Role.USER

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value):
        if value is None:
            return Role.USER
        return value.strip().upper() if isinstance(value, str) else value


class UserRead(Schema):
    id: int
    username: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None


class UserRoleUpdate(Schema):
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


# ---------- Auth ----------

class AuthRequest(Schema):
    username: str
    password: str


class AuthResponse(Schema):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    token: str
    role: str


class ResponseMessage(Schema):
    code: str
    description: str = ""


# ---------- Pagination envelope ----------

class Paginated(Schema, Generic[T]):
    data: List[T]
    page: int
    size: int
    total_elements: int

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size > 0 else 0

    @computed_field(alias="numberOfElements")
    @property
    def number_of_elements(self) -> int:
        return len(self.data)

    @classmethod
    def from_page(cls, page: Page) -> "Paginated":
        return cls(data=page.items, page=page.page, size=page.size, total_elements=page.total)
