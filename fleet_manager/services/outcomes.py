# fleet_manager/services/outcomes.py
"""
Structured results returned by the core services.

Expected conditions (not found, duplicate key, policy denial, blocked delete...)
are returned as one of the failure types below instead of being raised.
Routers turn them into HTTP responses via status_code / message.
"""

from dataclasses import dataclass
from typing import Optional


class Failure:
    """Base class for every recoverable failure outcome."""
    status_code = 400

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Unauthenticated(Failure):
    reason: str = "Not authenticated"
    status_code = 401

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class PermissionDenied(Failure):
    capability: str
    reason: Optional[str] = None
    status_code = 403

    @property
    def message(self) -> str:
        return self.reason or f"Permission denied. '{self.capability}' required."


@dataclass(frozen=True)
class NotFound(Failure):
    entity_kind: str
    entity_id: object = None
    status_code = 404

    @property
    def message(self) -> str:
        return f"{self.entity_kind} not found"


@dataclass(frozen=True)
class Conflict(Failure):
    field: str
    detail: str

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True)
class ValidationFailed(Failure):
    field: str
    rule: str

    @property
    def message(self) -> str:
        return self.rule


@dataclass(frozen=True)
class Blocked(Failure):
    reason: str

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True)
class Removed:
    entity_kind: str
    entity_id: object

    @property
    def message(self) -> str:
        return f"{self.entity_kind} removed"


def is_failure(result) -> bool:
    return isinstance(result, Failure)


def integrity_conflict(exc, model, label: str) -> Conflict:
    """Conflict naming the unique column of `model` that an IntegrityError hit."""
    text = str(getattr(exc, "orig", exc))
    columns = sorted((c.name for c in model.__table__.columns if c.unique), key=len, reverse=True)
    for column in columns:
        if column in text:
            return Conflict(column, f"{label} with this {column.replace('_', ' ')} already exists")
    return Conflict("unique", f"{label} already exists")
