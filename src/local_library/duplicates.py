"""
Duplicate avoidance for uniquely named entities (genres, authors).

The controller looks up the candidate's normalized name and asks
:func:`resolve_duplicate` whether to persist or to send the user to the
existing entity. The check runs before the write and is not transactional;
the store's unique ``name_key`` column rejects a racing insert, and the
controller resolves that ``Conflict`` the same way.
"""

from typing import Any

from .normalize import author_name_key, normalize_name
from .outcomes import Persist, Redirect

__all__ = ["author_name_key", "normalize_name", "resolve_duplicate"]


def resolve_duplicate(
    candidate_key: str, existing: Any | None, exclude_id: str | None = None
) -> Redirect | Persist:
    """
    Decide between redirecting to ``existing`` and persisting the candidate.

    Args:
        candidate_key: Normalized name of the entity about to be written
        existing: Entity found under ``candidate_key``, or None
        exclude_id: Id of the entity being updated; it never duplicates itself

    Returns:
        Redirect to the existing entity's url, or Persist
    """
    if existing is None or existing.id == exclude_id:
        return Persist()
    if existing.name_key != candidate_key:
        return Persist()
    return Redirect(existing_id=existing.id, location=existing.url)
