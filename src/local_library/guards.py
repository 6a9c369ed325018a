"""
Delete guards for the catalog.

Guards only classify whether a delete may proceed; the controller performs the
delete itself. Both functions are pure.
"""

from collections.abc import Iterable
from typing import Any

from .models.book_instance import BookInstance
from .outcomes import Blocked, Clear


def check_referenced(dependents: Iterable[Any]) -> Clear | Blocked:
    """
    Block a delete while any entity still references the target.

    Used for genres and authors (dependents are their books) and for books
    (dependents are their copies). The blocking entities are returned so they
    can be listed to the user.
    """
    dependents = tuple(dependents)
    if dependents:
        return Blocked(dependents=dependents)
    return Clear()


def check_instance_status(instance: BookInstance) -> Clear | Blocked:
    """Only a copy on the shelf (``Available``) may be deleted."""
    if instance.is_available:
        return Clear()
    return Blocked(reason=instance.status.value)
