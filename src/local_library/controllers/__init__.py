"""
Controllers for the Local Library catalog.

One controller class per entity type, each exposing the eight use cases
(``list``, ``detail``, ``create_get``, ``create_post``, ``delete_get``,
``delete_post``, ``update_get``, ``update_post``), plus the catalog index and
the :func:`dispatch` entry point.
"""

from .author import AuthorController
from .book import BookController
from .book_instance import BookInstanceController
from .dispatch import CatalogRequest, dispatch
from .genre import GenreController
from .index import IndexController

__all__ = [
    "AuthorController",
    "BookController",
    "BookInstanceController",
    "CatalogRequest",
    "GenreController",
    "IndexController",
    "dispatch",
]
