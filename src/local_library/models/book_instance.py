"""
BookInstance model for the Local Library catalog.

A book instance is one physical copy of a book. Its status drives whether it
may be removed from the catalog: only copies sitting on the shelf
(``Available``) can be deleted.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

BOOK_INSTANCE_ID_PATTERN = r"^bookinstance_[0-9a-f]{32}$"


class BookInstanceStatus(str, Enum):
    """Shelf status of a physical copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


class BookInstance(BaseModel):
    """Represents one physical copy of a book."""

    id: str = Field(
        ...,
        description="Unique identifier for the copy",
        pattern=BOOK_INSTANCE_ID_PATTERN,
        examples=["bookinstance_3f2e1d0c9b8a47f6a5e4d3c2b1a09f8e"],
    )

    book_id: str = Field(
        ...,
        description="Identifier of the book this copy belongs to",
        examples=["book_9d1e0f2a3b4c4d5e8f6a7b8c9d0e1f2a"],
    )

    imprint: str = Field(
        ...,
        description="Publisher and edition details of the copy",
        min_length=1,
        max_length=500,
        examples=["London Gollancz, 2014."],
    )

    status: BookInstanceStatus = Field(
        default=BookInstanceStatus.MAINTENANCE,
        description="Current shelf status",
    )

    due_back: date | None = Field(
        None,
        description="Date the copy is expected back; only set when not available",
        examples=["2024-03-05"],
    )

    @model_validator(mode="after")
    def validate_due_back(self) -> "BookInstance":
        """An available copy is on the shelf and has no due-back date."""
        if self.status is BookInstanceStatus.AVAILABLE and self.due_back is not None:
            raise ValueError("An available copy cannot have a due-back date")
        return self

    @property
    def is_available(self) -> bool:
        return self.status is BookInstanceStatus.AVAILABLE

    @property
    def due_back_formatted(self) -> str:
        """Due-back date for display, e.g. ``Mar 5, 2024``."""
        if self.due_back is None:
            return ""
        return f"{self.due_back:%b} {self.due_back.day}, {self.due_back.year}"

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "bookinstance_3f2e1d0c9b8a47f6a5e4d3c2b1a09f8e",
                "book_id": "book_9d1e0f2a3b4c4d5e8f6a7b8c9d0e1f2a",
                "imprint": "London Gollancz, 2014.",
                "status": "Loaned",
                "due_back": "2024-03-05",
            }
        },
    )
