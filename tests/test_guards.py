"""Tests for the delete guards."""

from datetime import date

import pytest

from local_library.guards import check_instance_status, check_referenced
from local_library.models import Book, BookInstance, BookInstanceStatus
from local_library.outcomes import Blocked, Clear

BOOK_ID = "book_" + "1" * 32


def make_book(title: str) -> Book:
    return Book(
        id="book_" + title.encode().hex().ljust(32, "0")[:32],
        title=title,
        author_id="author_" + "2" * 32,
        summary="Summary",
        isbn="9780000000000",
    )


def make_copy(status: BookInstanceStatus, due_back: date | None = None) -> BookInstance:
    return BookInstance(
        id="bookinstance_" + "3" * 32,
        book_id=BOOK_ID,
        imprint="Gollancz, 2014.",
        status=status,
        due_back=due_back,
    )


class TestCheckReferenced:
    def test_no_dependents_is_clear(self):
        assert check_referenced([]) == Clear()

    def test_dependents_block_with_exact_list(self):
        books = [make_book("Dune"), make_book("Emma")]

        outcome = check_referenced(books)

        assert isinstance(outcome, Blocked)
        assert outcome.dependents == tuple(books)
        assert outcome.reason is None

    def test_accepts_any_iterable(self):
        outcome = check_referenced(book for book in [make_book("Dune")])

        assert isinstance(outcome, Blocked)
        assert len(outcome.dependents) == 1


class TestCheckInstanceStatus:
    def test_available_copy_is_clear(self):
        assert check_instance_status(make_copy(BookInstanceStatus.AVAILABLE)) == Clear()

    @pytest.mark.parametrize(
        "status",
        [BookInstanceStatus.LOANED, BookInstanceStatus.MAINTENANCE, BookInstanceStatus.RESERVED],
    )
    def test_other_statuses_block_with_reason(self, status: BookInstanceStatus):
        outcome = check_instance_status(make_copy(status, due_back=date(2024, 3, 5)))

        assert outcome == Blocked(reason=status.value)
