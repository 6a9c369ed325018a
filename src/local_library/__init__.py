"""
Local Library catalog core.

Catalog management for a lending library: books, authors, genres and the
physical copies of each book.

Key Components:
- validation / forms: declarative form rules and the validation pipeline
- gateway: async repository facade over the SQLAlchemy store
- guards: delete guards (referenced entities, copy status)
- duplicates: duplicate-name resolution for genres and authors
- controllers: one controller per entity type plus ``dispatch``
- database: SQLAlchemy schema, sessions and repositories
- config: configuration management with pydantic-settings
"""

__version__ = "0.1.0"

from .controllers import CatalogRequest, dispatch
from .gateway import Catalog

__all__ = [
    "Catalog",
    "CatalogRequest",
    "__version__",
    "dispatch",
]
