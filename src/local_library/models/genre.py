"""
Genre model for the Local Library catalog.

Genres classify books. A genre's name is unique once normalized (see
``local_library.normalize.normalize_name``), so "Fiction" and " fiction "
denote the same genre.
"""

from pydantic import BaseModel, ConfigDict, Field

from ..normalize import normalize_name

GENRE_ID_PATTERN = r"^genre_[0-9a-f]{32}$"


class Genre(BaseModel):
    """A genre in the catalog."""

    id: str = Field(
        ...,
        description="Unique identifier for the genre",
        pattern=GENRE_ID_PATTERN,
        examples=["genre_0c6f5dbb9d7a4a0f9b1c2e3d4f5a6b7c"],
    )

    name: str = Field(
        ...,
        description="Display name of the genre",
        min_length=1,
        max_length=100,
        examples=["Fantasy", "Science Fiction", "French Poetry"],
    )

    @property
    def name_key(self) -> str:
        return normalize_name(self.name)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "genre_0c6f5dbb9d7a4a0f9b1c2e3d4f5a6b7c",
                "name": "Fantasy",
            }
        },
    )
