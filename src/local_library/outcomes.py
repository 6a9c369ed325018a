"""
Outcome and result types for the catalog core.

Outcomes are tagged values returned instead of raised exceptions, so every
decision (invalid form, missing entity, blocked delete, duplicate name) stays
ordinary control flow:

- Validation: ``ValidationOutcome`` with ``FieldError`` entries
- Lookups: ``NotFound``
- Integrity guard: ``Clear`` / ``Blocked``
- Duplicate resolver: ``Redirect`` / ``Persist``
- Writes: ``Conflict`` (unique key taken), ``Deleted``

Controllers turn them into one of three results for the presentation layer:
``ViewResult``, ``RedirectResult`` or ``ErrorResult``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Outcome(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


# === Validation ===


class FieldError(_Outcome):
    """One violated rule on one form field."""

    field: str
    message: str
    value: Any = None


class ValidationOutcome(_Outcome):
    """Sanitized field values plus every violation found, in field order."""

    fields: dict[str, Any] = Field(default_factory=dict)
    errors: tuple[FieldError, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, field: str) -> list[FieldError]:
        return [error for error in self.errors if error.field == field]

    def with_errors(self, *errors: FieldError) -> "ValidationOutcome":
        """Return a copy with extra errors appended (e.g. failed reference checks)."""
        return ValidationOutcome(fields=self.fields, errors=(*self.errors, *errors))


# === Repository facade ===


class NotFound(_Outcome):
    """The entity does not exist, or its id is malformed."""

    entity: str
    entity_id: str


class Conflict(_Outcome):
    """A write was refused because a unique key is already taken."""

    entity: str
    detail: str


class Deleted(_Outcome):
    """The entity was removed."""

    entity: str
    entity_id: str


# === Integrity guard ===


class Clear(_Outcome):
    """The delete may proceed."""


class Blocked(_Outcome):
    """The delete must not proceed.

    ``dependents`` lists the entities still referencing the target;
    ``reason`` explains a status-based refusal.
    """

    dependents: tuple[Any, ...] = ()
    reason: str | None = None


# === Duplicate resolver ===


class Redirect(_Outcome):
    """An equivalent entity already exists; use its identity instead."""

    existing_id: str
    location: str


class Persist(_Outcome):
    """No equivalent entity exists; the candidate may be written."""


# === Controller results ===


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    STORE_ERROR = "StoreError"


class ViewResult(_Outcome):
    """Render ``template`` with ``data``."""

    template: str
    data: dict[str, Any] = Field(default_factory=dict)


class RedirectResult(_Outcome):
    """Send the user to ``location``."""

    location: str


class ErrorResult(_Outcome):
    """A failure the boundary layer reports (404-class or infrastructure)."""

    kind: ErrorKind
    detail: str


CatalogResult = ViewResult | RedirectResult | ErrorResult
