"""
Inbound entry point for the presentation boundary.

A ``CatalogRequest`` names the entity type, the use case, the path parameters
and the submitted form fields. :func:`dispatch` routes it to the controller
and turns a propagated ``StoreError`` into ``ErrorResult(kind=StoreError)``.
"""

import logging
import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import StoreError
from ..gateway import Catalog
from ..outcomes import CatalogResult, ErrorKind, ErrorResult
from .author import AuthorController
from .book import BookController
from .book_instance import BookInstanceController
from .genre import GenreController
from .index import IndexController

logger = logging.getLogger(__name__)

EntityName = Literal["index", "genre", "author", "book", "bookinstance"]
Operation = Literal[
    "index",
    "list",
    "detail",
    "create_get",
    "create_post",
    "delete_get",
    "delete_post",
    "update_get",
    "update_post",
]

CONTROLLERS = {
    "genre": GenreController,
    "author": AuthorController,
    "book": BookController,
    "bookinstance": BookInstanceController,
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class CatalogRequest(BaseModel):
    """
    One use-case invocation.

    ``operation`` accepts snake_case (``create_post``) or camelCase
    (``createPost``). ``params`` carries the path id under ``"id"``.
    """

    model_config = ConfigDict(frozen=True)

    entity_type: EntityName
    operation: Operation
    params: dict[str, str] = Field(default_factory=dict)
    fields: dict[str, Any] = Field(default_factory=dict)

    @field_validator("operation", mode="before")
    @classmethod
    def normalize_operation(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _CAMEL_BOUNDARY.sub("_", v).lower()
        return v

    @property
    def entity_id(self) -> str:
        return self.params.get("id", "")


async def _route(request: CatalogRequest, catalog: Catalog) -> CatalogResult:
    if request.entity_type == "index":
        return await IndexController(catalog).index()

    controller = CONTROLLERS[request.entity_type](catalog)
    operation = request.operation
    if operation in ("list", "create_get"):
        return await getattr(controller, operation)()
    if operation == "create_post":
        return await controller.create_post(request.fields)
    if operation == "update_post":
        return await controller.update_post(request.entity_id, request.fields)
    if operation == "index":
        raise ValueError(f"{request.entity_type} has no index operation")
    return await getattr(controller, operation)(request.entity_id)


async def dispatch(request: CatalogRequest, catalog: Catalog) -> CatalogResult:
    """
    Run one use case and return its result.

    Raises:
        ValueError: If the entity type does not support the operation
    """
    try:
        return await _route(request, catalog)
    except StoreError as e:
        logger.error(
            "Store failure in %s.%s: %s", request.entity_type, request.operation, e
        )
        return ErrorResult(kind=ErrorKind.STORE_ERROR, detail=str(e))
