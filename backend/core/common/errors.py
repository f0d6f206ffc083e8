"""Typed domain errors raised by the service layer.

Field-level validation keeps using Django's ``ValidationError``; the classes
below cover lifecycle failures that are not tied to a single input field.
"""

from __future__ import annotations

import re

from django.core.exceptions import ValidationError

__all__ = [
    "ConstraintError",
    "DomainError",
    "ExpiredError",
    "InvalidStateError",
    "NotFoundError",
    "ValidationError",
]


class DomainError(Exception):
    code = "domain_error"
    status_code = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def as_payload(self) -> dict:
        payload = {"detail": self.message, "code": self.code}
        payload.update({key: value for key, value in self.context.items() if value is not None})
        return payload


class InvalidStateError(DomainError):
    code = "invalid_state"
    status_code = 409

    def __init__(self, message: str, *, current_status: str = "", action: str = ""):
        super().__init__(message, current_status=current_status, action=action)
        self.current_status = current_status
        self.action = action

    @classmethod
    def for_action(cls, *, entity: str, current_status: str, action: str) -> "InvalidStateError":
        return cls(
            f"Cannot {action} {entity} while status is {current_status}.",
            current_status=current_status,
            action=action,
        )


class ExpiredError(DomainError):
    code = "expired"
    status_code = 409


class NotFoundError(DomainError):
    code = "not_found"
    status_code = 404

    def __init__(self, message: str, *, resource: str = "", pk=None):
        super().__init__(message, resource=resource, pk=str(pk) if pk is not None else None)
        self.resource = resource
        self.pk = pk


_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")
_POSTGRES_KEY_RE = re.compile(r"Key \((?P<columns>[^)]+)\)=")


class ConstraintError(DomainError):
    """Persistence-layer uniqueness or reference violation."""

    code = "constraint"
    status_code = 400

    def __init__(self, message: str, *, field: str = ""):
        super().__init__(message, field=field or None)
        self.field = field

    @classmethod
    def from_integrity_error(cls, exc: Exception) -> "ConstraintError":
        raw = str(exc)
        if "FOREIGN KEY" in raw.upper():
            return cls("Referenced record does not exist.")

        match = _SQLITE_UNIQUE_RE.search(raw) or _POSTGRES_KEY_RE.search(raw)
        if match:
            column = match.group("columns").split(",")[0].strip().split(".")[-1].strip('"')
            field = column.lower()
            return cls(f"Duplicate field value for {field}.", field=field)
        return cls("Duplicate or invalid reference value.")

    def as_payload(self) -> dict:
        payload = super().as_payload()
        if self.field:
            payload["errors"] = {self.field: [self.message]}
        return payload
