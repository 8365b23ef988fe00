"""Application error taxonomy.

Services raise these; ``main.register_exception_handlers`` turns them into
``{"code": ..., "description": ...}`` responses.
"""
from __future__ import annotations

from typing import List, Tuple


FieldErrors = List[Tuple[str, str]]


class AppError(Exception):
    kind = "Error"
    status_code = 500

    def __init__(self, entity: str, message: str):
        super().__init__(message)
        self.entity = entity
        self.message = message

    @property
    def code(self) -> str:
        return self.entity[:1].lower() + self.entity[1:] + self.kind


class NotFoundError(AppError, LookupError):
    kind = "NotFound"
    status_code = 404


class AlreadyExistsError(AppError):
    kind = "AlreadyExists"
    status_code = 409


class InvalidArgumentError(AppError, ValueError):
    kind = "InvalidArgument"
    status_code = 400


class NotAuthorizedError(AppError):
    kind = "NotAuthorized"
    status_code = 401


class ForbiddenError(AppError, PermissionError):
    kind = "Forbidden"
    status_code = 403


class ReferentialIntegrityError(AppError):
    kind = "ReferentialIntegrity"
    status_code = 409


class ServerError(AppError):
    kind = "ServerError"
    status_code = 500


class ValidationError(AppError, ValueError):
    kind = "ValidationFailed"
    status_code = 400

    def __init__(self, entity: str, errors: FieldErrors):
        super().__init__(entity, "; ".join(f"{field}: {message}" for field, message in errors))
        self.errors = list(errors)
