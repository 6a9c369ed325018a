"""
Shared orchestration steps for the entity controllers.

Every use case ends in exactly one ``ViewResult``, ``RedirectResult`` or
``ErrorResult``. Recoverable situations (invalid form, duplicate name, blocked
delete, missing entity) are outcome values; only ``StoreError`` escapes.
"""

import asyncio
import logging
from typing import Any

from pydantic import BaseModel

from ..duplicates import resolve_duplicate
from ..errors import StoreError
from ..gateway import Catalog, EntityGateway
from ..observability.metrics import record_outcome
from ..outcomes import (
    Conflict,
    ErrorKind,
    ErrorResult,
    NotFound,
    Persist,
    Redirect,
    RedirectResult,
    ValidationOutcome,
    ViewResult,
)

logger = logging.getLogger(__name__)


class EntityController:
    """Base class holding the catalog gateways and the common flow steps."""

    #: Entity name used in spans, metrics and outcomes
    entity: str = ""
    #: Where delete flows land
    list_url: str = ""
    #: Detail of the 404-class error
    not_found_detail: str = ""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def not_found(self, outcome: NotFound) -> ErrorResult:
        logger.debug("%s %s not found", outcome.entity, outcome.entity_id)
        return ErrorResult(kind=ErrorKind.NOT_FOUND, detail=self.not_found_detail)

    def redirect_to_list(self) -> RedirectResult:
        return RedirectResult(location=self.list_url)

    def invalid_form(
        self, template: str, data: dict[str, Any], validation: ValidationOutcome
    ) -> ViewResult:
        """Re-render a form with the sanitized values and every field error."""
        record_outcome(self.entity, "invalid")
        return ViewResult(template=template, data={**data, "errors": list(validation.errors)})

    async def lookup_with_dependents(
        self,
        gateway: EntityGateway,
        entity_id: str,
        dependents: EntityGateway,
        field: str,
        sort: str | None = None,
    ) -> tuple[Any, list[Any]]:
        """
        Fetch an entity and the entities referencing it, concurrently.

        A malformed id short-circuits to ``NotFound`` without querying the
        dependents.
        """
        if not gateway.is_valid_id(entity_id):
            return NotFound(entity=gateway.entity, entity_id=str(entity_id)), []

        return await asyncio.gather(
            gateway.find_by_id(entity_id),
            dependents.find_by_field(field, entity_id, sort=sort),
        )

    async def persist(
        self, gateway: EntityGateway, data: BaseModel, entity_id: str | None = None
    ) -> RedirectResult | ErrorResult:
        """Save (``entity_id`` None) or replace an entity and redirect to it."""
        written = await (
            gateway.save(data) if entity_id is None else gateway.update(entity_id, data)
        )
        if isinstance(written, NotFound):
            return self.not_found(written)
        if isinstance(written, Conflict):
            raise StoreError(written.detail)
        return RedirectResult(location=written.url)

    async def persist_unique(
        self,
        gateway: EntityGateway,
        name_key: str,
        data: BaseModel,
        entity_id: str | None = None,
    ) -> RedirectResult | ErrorResult:
        """
        Persist a uniquely named entity unless an equivalent one exists.

        The existence check and the write are separate store calls. When a
        concurrent request wins the race the unique key rejects our write with
        ``Conflict`` and the user is sent to the winner instead.
        """
        existing = await gateway.find_by_name_key(name_key)
        decision = resolve_duplicate(name_key, existing, exclude_id=entity_id)
        if isinstance(decision, Redirect):
            record_outcome(self.entity, "redirect")
            return RedirectResult(location=decision.location)

        written = await (
            gateway.save(data) if entity_id is None else gateway.update(entity_id, data)
        )
        if isinstance(written, NotFound):
            return self.not_found(written)
        if isinstance(written, Conflict):
            existing = await gateway.find_by_name_key(name_key)
            decision = resolve_duplicate(name_key, existing, exclude_id=entity_id)
            if isinstance(decision, Persist):
                raise StoreError(written.detail)
            record_outcome(self.entity, "redirect")
            return RedirectResult(location=decision.location)
        return RedirectResult(location=written.url)
