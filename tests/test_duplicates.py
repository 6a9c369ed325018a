"""Tests for name normalization and duplicate resolution."""

import pytest

from local_library.duplicates import author_name_key, normalize_name, resolve_duplicate
from local_library.models import Author, Genre
from local_library.outcomes import Persist, Redirect

GENRE_ID = "genre_" + "a" * 32
OTHER_GENRE_ID = "genre_" + "b" * 32


class TestNormalizeName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (" Fiction ", "fiction"),
            ("Science   Fiction", "science fiction"),
            ("SCIENCE\tfiction\n", "science fiction"),
            ("Straße", "strasse"),
        ],
    )
    def test_normalize(self, raw: str, expected: str):
        assert normalize_name(raw) == expected

    def test_author_key_is_family_first(self):
        assert author_name_key(" Ursula ", "LeGuin") == "leguin, ursula"


class TestResolveDuplicate:
    def test_nothing_found_persists(self):
        assert resolve_duplicate("fiction", None) == Persist()

    def test_existing_redirects_to_canonical_identity(self):
        existing = Genre(id=GENRE_ID, name="Fiction")

        outcome = resolve_duplicate(normalize_name(" Fiction "), existing)

        assert outcome == Redirect(existing_id=GENRE_ID, location=f"/catalog/genre/{GENRE_ID}")

    def test_entity_being_updated_is_excluded(self):
        existing = Genre(id=GENRE_ID, name="Fiction")

        assert resolve_duplicate("fiction", existing, exclude_id=GENRE_ID) == Persist()

    def test_other_entity_is_not_excluded(self):
        existing = Genre(id=GENRE_ID, name="Fiction")

        outcome = resolve_duplicate("fiction", existing, exclude_id=OTHER_GENRE_ID)

        assert isinstance(outcome, Redirect)

    def test_key_mismatch_persists(self):
        existing = Genre(id=GENRE_ID, name="Fiction")

        assert resolve_duplicate("poetry", existing) == Persist()

    def test_author_redirect(self):
        author_id = "author_" + "c" * 32
        existing = Author(id=author_id, first_name="Ursula", family_name="LeGuin")

        outcome = resolve_duplicate(author_name_key("ursula", "leguin"), existing)

        assert outcome.existing_id == author_id
        assert outcome.location == f"/catalog/author/{author_id}"
