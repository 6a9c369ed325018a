"""Name normalization shared by the models, the store and the duplicate resolver."""

import re

from markupsafe import Markup

_WHITESPACE = re.compile(r"\s+")


def normalize_name(value: str) -> str:
    """Resolve character references, collapse runs of whitespace, trim and casefold.

    Escaped form input and raw text normalize alike.

    >>> normalize_name("  Science   FICTION ")
    'science fiction'
    >>> normalize_name("Children&#39;s") == normalize_name("Children's")
    True
    """
    return _WHITESPACE.sub(" ", Markup(value).unescape()).strip().casefold()


def author_name_key(first_name: str, family_name: str) -> str:
    """Uniqueness key for an author, family name first."""
    return f"{normalize_name(family_name)}, {normalize_name(first_name)}"
