"""Catalog home page: entity counts."""

import asyncio

from ..gateway import Catalog
from ..models import BookInstanceStatus
from ..observability.decorators import trace_controller
from ..outcomes import ViewResult


class IndexController:
    """Counts every entity type with five concurrent store calls."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    @trace_controller("catalog", "index")
    async def index(self) -> ViewResult:
        (
            book_count,
            book_instance_count,
            book_instance_available_count,
            author_count,
            genre_count,
        ) = await asyncio.gather(
            self.catalog.books.count(),
            self.catalog.book_instances.count(),
            self.catalog.book_instances.count(status=BookInstanceStatus.AVAILABLE),
            self.catalog.authors.count(),
            self.catalog.genres.count(),
        )
        return ViewResult(
            template="index",
            data={
                "title": "Local Library Home",
                "book_count": book_count,
                "book_instance_count": book_instance_count,
                "book_instance_available_count": book_instance_available_count,
                "author_count": author_count,
                "genre_count": genre_count,
            },
        )
