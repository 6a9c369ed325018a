"""Exception hierarchy for the catalog.

Recoverable conditions (invalid forms, missing entities, blocked deletes,
duplicate names) travel as outcome values, see ``local_library.outcomes``.
Exceptions are reserved for the storage collaborator and for infrastructure
failures the boundary layer has to report.
"""


class CatalogError(Exception):
    """Base exception for catalog operations."""


class StoreError(CatalogError):
    """Raised when the underlying store fails (I/O, driver, constraint other than uniqueness)."""


class InvalidIdentifierError(CatalogError):
    """Raised by the store when an identifier is not well formed for its entity."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"Malformed {entity} id: {entity_id!r}")
        self.entity = entity
        self.entity_id = entity_id


class NotFoundError(CatalogError):
    """Raised when an entity that must exist is missing."""


class DuplicateError(CatalogError):
    """Raised when a write violates a unique key."""
