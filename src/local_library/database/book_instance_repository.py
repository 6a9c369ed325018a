"""
BookInstance repository implementation for the Local Library catalog store.
"""

from datetime import date

from pydantic import BaseModel

from ..database.schema import BookInstance as BookInstanceDB
from ..models.book_instance import BookInstance as BookInstanceModel
from ..models.book_instance import BookInstanceStatus
from .repository import CatalogRepository


class BookInstanceCreateSchema(BaseModel):
    """Schema for creating or fully replacing a book copy."""

    book_id: str
    imprint: str
    status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE
    due_back: date | None = None


class BookInstanceRepository(
    CatalogRepository[BookInstanceDB, BookInstanceCreateSchema, BookInstanceModel]
):
    """Repository for book copy data access."""

    id_prefix = "bookinstance"

    @property
    def model_class(self):
        return BookInstanceDB

    @property
    def response_schema(self):
        return BookInstanceModel
