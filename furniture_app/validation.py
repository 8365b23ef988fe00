"""Field-level checks for inbound payloads.

Each ``validate_*`` function takes the raw (camelCase) JSON payload and
returns a list of ``(field, message)`` pairs; an empty list means valid.
Routers run these before handing anything to a service.
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import FieldErrors, ValidationError
from .models.ad import Condition
from .models.user import Role


PASSWORD_RE = re.compile(r"^(?=.*?[a-z])(?=.*?[A-Z])(?=.*?\d)(?=.*?[@#$!%&*]).{8,}$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _text(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _required_text(errors: FieldErrors, payload, key: str, label: str,
                   min_len: int | None = None, max_len: int | None = None) -> None:
    value = payload.get(key)
    if value is None:
        errors.append((key, f"{label} is required."))
        return
    if not isinstance(value, str):
        errors.append((key, f"{label} must be text."))
        return
    if not value.strip():
        errors.append((key, f"{label} cannot be empty."))
        return
    if min_len is not None and max_len is not None and not (min_len <= len(value) <= max_len):
        errors.append((key, f"{label} must be between {min_len} and {max_len} characters."))


def _enum_member(enum_cls, value) -> bool:
    if not isinstance(value, str):
        return False
    return value.strip().upper() in enum_cls.__members__


def validate_ad_insert(payload: Dict[str, Any], partial: bool = False) -> FieldErrors:
    """``partial`` relaxes categoryName/cityName (an update may keep the current ones)."""
    errors: FieldErrors = []
    _required_text(errors, payload, "title", "Title", 2, 30)

    for key, label in (("categoryName", "Category name"), ("cityName", "City name")):
        if partial and payload.get(key) is None:
            continue
        _required_text(errors, payload, key, label)

    condition = payload.get("condition")
    if condition is None:
        errors.append(("condition", "Condition is required."))
    elif not _enum_member(Condition, condition):
        errors.append(("condition", "Condition must be one of " + ", ".join(Condition.__members__) + "."))

    price = payload.get("price")
    if price is None or price == "":
        errors.append(("price", "Price is required."))
    else:
        try:
            if isinstance(price, bool):
                raise InvalidOperation
            if Decimal(str(price)) < 0:
                errors.append(("price", "Price must not be negative."))
        except InvalidOperation:
            errors.append(("price", "Price must be a number."))

    is_available = payload.get("isAvailable")
    if is_available is None:
        errors.append(("isAvailable", "Availability is required."))
    elif not isinstance(is_available, bool):
        errors.append(("isAvailable", "Availability must be true or false."))

    _required_text(errors, payload, "description", "Description", 2, 100)
    return errors


def validate_user_insert(payload: Dict[str, Any]) -> FieldErrors:
    errors: FieldErrors = []
    _required_text(errors, payload, "username", "Username")

    password = _text(payload, "password")
    if password is None or not PASSWORD_RE.match(password):
        errors.append(("password", "Invalid Password"))

    _required_text(errors, payload, "firstName", "First name")
    _required_text(errors, payload, "lastName", "Last name")

    email = _text(payload, "email")
    if email is None or not EMAIL_RE.match(email):
        errors.append(("email", "Invalid email"))

    _required_text(errors, payload, "phone", "Contact phone")

    role = payload.get("role")
    if role is not None and not _enum_member(Role, role):
        errors.append(("role", "Role must be USER or ADMIN."))
    return errors


def validate_auth_request(payload: Dict[str, Any]) -> FieldErrors:
    errors: FieldErrors = []
    _required_text(errors, payload, "username", "Username")
    _required_text(errors, payload, "password", "Password")
    return errors


def validate_role_update(payload: Dict[str, Any]) -> FieldErrors:
    role = payload.get("role")
    if role is None:
        return [("role", "Role is required")]
    if not _enum_member(Role, role):
        return [("role", "Role must be USER or ADMIN.")]
    return []


def ensure_valid(entity: str, errors: FieldErrors) -> None:
    if errors:
        raise ValidationError(entity, errors)


def parse_payload(entity: str, model, payload: Dict[str, Any]):
    """``model.model_validate`` with pydantic failures reported as ``ValidationError``."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(entity, [
            (".".join(map(str, e["loc"])) or entity, e["msg"]) for e in exc.errors()
        ]) from exc
