"""
Author model for the Local Library catalog.

Authors are referenced by books through ``Book.author_id``. An author cannot be
removed while any book still points at it.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..normalize import author_name_key

AUTHOR_ID_PATTERN = r"^author_[0-9a-f]{32}$"


class Author(BaseModel):
    """
    Represents an author in the catalog.

    The derived ``name`` and ``lifespan`` properties mirror what list and
    detail pages display.
    """

    id: str = Field(
        ...,
        description="Unique identifier for the author",
        pattern=AUTHOR_ID_PATTERN,
        examples=["author_5b0e2c7d9a4f4e1b8c3d2a1f0e9d8c7b"],
    )

    first_name: str = Field(
        ...,
        description="Given name(s) of the author",
        min_length=1,
        max_length=100,
        examples=["Patrick", "Ursula K."],
    )

    family_name: str = Field(
        ...,
        description="Family name of the author",
        min_length=1,
        max_length=100,
        examples=["Rothfuss", "Le Guin"],
    )

    date_of_birth: date | None = Field(
        None,
        description="Author's date of birth",
        examples=["1973-06-06"],
    )

    date_of_death: date | None = Field(
        None,
        description="Author's date of death (if applicable)",
        examples=["2018-01-22"],
    )

    @model_validator(mode="after")
    def validate_dates(self) -> "Author":
        """Ensure death date is not before birth date."""
        if self.date_of_birth and self.date_of_death and self.date_of_death < self.date_of_birth:
            raise ValueError("Date of death cannot be before date of birth")
        return self

    @property
    def name(self) -> str:
        """Full name as "family, first"; empty if either part is missing."""
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        birth = self.date_of_birth.isoformat() if self.date_of_birth else ""
        death = self.date_of_death.isoformat() if self.date_of_death else ""
        return f"{birth} - {death}"

    @property
    def name_key(self) -> str:
        return author_name_key(self.first_name, self.family_name)

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "author_5b0e2c7d9a4f4e1b8c3d2a1f0e9d8c7b",
                "first_name": "Patrick",
                "family_name": "Rothfuss",
                "date_of_birth": "1973-06-06",
                "date_of_death": None,
            }
        },
    )
