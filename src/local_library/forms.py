"""Rule tables for the catalog's forms, one per entity type."""

from .models.book_instance import BookInstanceStatus
from .validation import FieldFormat, FieldRule

STATUS_CHOICES = tuple(status.value for status in BookInstanceStatus)


def genre_form_rules(min_length: int = 3) -> dict[str, FieldRule]:
    return {
        "name": FieldRule(
            required=True,
            min_length=min_length,
            max_length=100,
            message=f"Genre name must contain at least {min_length} characters",
        ),
    }


GENRE_FORM = genre_form_rules()

AUTHOR_FORM = {
    "first_name": FieldRule(
        required=True,
        max_length=100,
        format=FieldFormat.ALPHANUMERIC,
        message="First name must be specified.",
        format_message="First name has non-alphanumeric characters.",
    ),
    "family_name": FieldRule(
        required=True,
        max_length=100,
        format=FieldFormat.ALPHANUMERIC,
        message="Family name must be specified.",
        format_message="Family name has non-alphanumeric characters.",
    ),
    "date_of_birth": FieldRule(
        optional=True,
        format=FieldFormat.ISO_DATE,
        message="Invalid date of birth",
    ),
    "date_of_death": FieldRule(
        optional=True,
        format=FieldFormat.ISO_DATE,
        message="Invalid date of death",
    ),
}

BOOK_FORM = {
    "title": FieldRule(required=True, max_length=500, message="Title must not be empty."),
    "author": FieldRule(required=True, max_length=50, message="Author must not be empty."),
    "summary": FieldRule(required=True, max_length=5000, message="Summary must not be empty."),
    "isbn": FieldRule(required=True, max_length=32, message="ISBN must not be empty."),
    "genre": FieldRule(multiple=True, max_length=50),
}

BOOK_INSTANCE_FORM = {
    "book": FieldRule(required=True, max_length=50, message="Book must be specified"),
    "imprint": FieldRule(required=True, max_length=500, message="Imprint must be specified"),
    "status": FieldRule(
        optional=True,
        format=FieldFormat.CHOICE,
        choices=STATUS_CHOICES,
        message="Invalid status",
    ),
    "due_back": FieldRule(optional=True, format=FieldFormat.ISO_DATE, message="Invalid date"),
}
