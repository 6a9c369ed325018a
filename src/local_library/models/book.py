"""
Book model for the Local Library catalog.

A book references exactly one author and an ordered list of genres. Physical
copies are modelled separately as ``BookInstance`` records that point back at
the book.
"""

from pydantic import BaseModel, ConfigDict, Field

BOOK_ID_PATTERN = r"^book_[0-9a-f]{32}$"


class Book(BaseModel):
    """
    Represents a title in the library catalog.

    ``genre_ids`` keeps the order in which genres were selected on the form.
    """

    id: str = Field(
        ...,
        description="Unique identifier for the book",
        pattern=BOOK_ID_PATTERN,
        examples=["book_9d1e0f2a3b4c4d5e8f6a7b8c9d0e1f2a"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
        examples=["The Name of the Wind", "The Wise Man's Fear"],
    )

    author_id: str = Field(
        ...,
        description="Identifier of the book's author",
        examples=["author_5b0e2c7d9a4f4e1b8c3d2a1f0e9d8c7b"],
    )

    summary: str = Field(
        ...,
        description="Brief summary of the book",
        min_length=1,
        max_length=5000,
    )

    isbn: str = Field(
        ...,
        description="International Standard Book Number as entered",
        min_length=1,
        max_length=32,
        examples=["9781473211896"],
    )

    genre_ids: tuple[str, ...] = Field(
        default=(),
        description="Ordered identifiers of the book's genres",
    )

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "book_9d1e0f2a3b4c4d5e8f6a7b8c9d0e1f2a",
                "title": "The Name of the Wind",
                "author_id": "author_5b0e2c7d9a4f4e1b8c3d2a1f0e9d8c7b",
                "summary": "I have stolen princesses back from sleeping barrow kings...",
                "isbn": "9781473211896",
                "genre_ids": ["genre_0c6f5dbb9d7a4a0f9b1c2e3d4f5a6b7c"],
            }
        },
    )
