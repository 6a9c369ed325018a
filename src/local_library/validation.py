"""
Form validation pipeline for the catalog.

Each form is described by a declarative rule table, ``{field: FieldRule}``,
interpreted by the single generic function :func:`validate_fields`. The
pipeline:

1. Normalizes raw input (missing → empty, list-valued fields → list)
2. Trims and HTML-escapes text values (escaping an escaped value is a no-op)
3. Checks every rule on every field, collecting all violations
4. Converts dates to :class:`datetime.date`

It never stops at the first failure and never raises for bad input: an
unparseable date is a ``FieldError`` like any other.
"""

import re
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from markupsafe import Markup, escape
from pydantic import BaseModel, ConfigDict

from .outcomes import FieldError, ValidationOutcome

_ALPHANUMERIC = re.compile(r"^[A-Za-z0-9]+$")

# Characters escaped beyond markupsafe's set
_EXTRA_ESCAPES = str.maketrans({"/": "&#x2F;", "\\": "&#x5C;", "`": "&#96;"})


class FieldFormat(str, Enum):
    """Format a field value must satisfy."""

    TEXT = "text"
    ISO_DATE = "iso_date"
    ALPHANUMERIC = "alphanumeric"
    CHOICE = "choice"


class FieldRule(BaseModel):
    """
    Validation and sanitization rule for one form field.

    Attributes:
        required: Value must be non-empty after trimming
        min_length: Minimum length after trimming
        max_length: Maximum length after trimming
        format: Format check applied to non-empty values
        optional: Falsy values are accepted and skip all other checks
        choices: Allowed values for ``FieldFormat.CHOICE``
        multiple: Field carries a list of values
        escape: HTML-escape the sanitized value
        message: Message for required and minimum-length failures (and the
            default for format failures); a maximum-length failure always
            names the limit
        format_message: Message for a failed format check
    """

    model_config = ConfigDict(frozen=True)

    required: bool = False
    min_length: int = 0
    max_length: int | None = None
    format: FieldFormat = FieldFormat.TEXT
    optional: bool = False
    choices: tuple[str, ...] = ()
    multiple: bool = False
    escape: bool = True
    message: str | None = None
    format_message: str | None = None


def unescape_html(value: str) -> str:
    """Resolve character references, e.g. ``Sci &amp; Fi`` to ``Sci & Fi``."""
    return Markup(value).unescape()


def escape_html(value: str) -> str:
    """
    Escape ``& < > " ' / \\ ` `` for safe re-display in HTML.

    Input is unescaped first, so a value that was escaped before (a stored
    name submitted again from an update form) comes back unchanged.
    """
    return str(escape(unescape_html(value))).translate(_EXTRA_ESCAPES)


def parse_iso_date(value: str) -> date | None:
    """Parse an ISO-8601 date or datetime string; ``None`` if it does not parse."""
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, list | tuple):
        raw = raw[0] if raw else ""
    return str(raw)


def _as_list(raw: Any) -> list[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, list | tuple):
        return [str(item) for item in raw]
    return [str(raw)]


def _check_length(
    name: str, value: str, rule: FieldRule, stored: str | None = None
) -> list[FieldError]:
    """Minimum length counts the entered text, maximum length the ``stored`` (escaped) text."""
    errors = []
    min_length = max(rule.min_length, 1 if rule.required else 0)
    if len(value) < min_length:
        message = rule.message or (
            f"{name} must be specified"
            if min_length == 1
            else f"{name} must contain at least {min_length} characters"
        )
        errors.append(FieldError(field=name, message=message, value=value))
    stored = value if stored is None else stored
    if rule.max_length is not None and len(stored) > rule.max_length:
        message = f"{name} must not exceed {rule.max_length} characters"
        errors.append(FieldError(field=name, message=message, value=value))
    return errors


def _check_format(name: str, value: str, rule: FieldRule) -> tuple[Any, list[FieldError]]:
    """Return the converted value and any format violation."""
    message = rule.format_message or rule.message
    if rule.format is FieldFormat.ISO_DATE:
        parsed = parse_iso_date(value)
        if parsed is None:
            return None, [FieldError(field=name, message=message or "Invalid date", value=value)]
        return parsed, []
    if rule.format is FieldFormat.ALPHANUMERIC and not _ALPHANUMERIC.match(value):
        message = message or f"{name} has non-alphanumeric characters"
        return value, [FieldError(field=name, message=message, value=value)]
    if rule.format is FieldFormat.CHOICE and value not in rule.choices:
        message = message or f"{name} must be one of: {', '.join(rule.choices)}"
        return value, [FieldError(field=name, message=message, value=value)]
    return value, []


def _sanitize(raw: str, rule: FieldRule) -> tuple[str, str]:
    """The trimmed plain text and the text as it will be stored."""
    value = raw.strip()
    if not rule.escape:
        return value, value
    value = unescape_html(value).strip()
    return value, escape_html(value)


def _validate_single(name: str, raw: Any, rule: FieldRule) -> tuple[Any, list[FieldError]]:
    value, stored = _sanitize(_as_text(raw), rule)

    if rule.optional and not value:
        return (None if rule.format is FieldFormat.ISO_DATE else ""), []

    errors = _check_length(name, value, rule, stored)

    converted: Any = value
    if value:
        converted, format_errors = _check_format(name, value, rule)
        errors.extend(format_errors)
    elif rule.format is FieldFormat.ISO_DATE:
        converted = None

    if isinstance(converted, str):
        converted = stored
    return converted, errors


def _validate_multiple(name: str, raw: Any, rule: FieldRule) -> tuple[list[Any], list[FieldError]]:
    values = [_sanitize(item, rule) for item in _as_list(raw)]
    values = [(value, stored) for value, stored in values if value]
    errors: list[FieldError] = []

    if rule.required and not values:
        message = rule.message or f"{name} must be specified"
        errors.append(FieldError(field=name, message=message, value=[]))

    sanitized = []
    optional_rule = rule.model_copy(update={"required": False})
    for item, stored in values:
        item_errors = _check_length(name, item, optional_rule, stored)
        converted, format_errors = _check_format(name, item, rule)
        errors.extend(item_errors + format_errors)
        if isinstance(converted, str):
            converted = stored
        sanitized.append(converted)
    return sanitized, errors


def validate_fields(raw: Mapping[str, Any], rules: Mapping[str, FieldRule]) -> ValidationOutcome:
    """
    Validate and sanitize ``raw`` form input against ``rules``.

    Every field named in ``rules`` appears in the result, whether it passed or
    not, so a form can be re-rendered with the sanitized values. Fields absent
    from ``rules`` are dropped.

    Args:
        raw: Field name to raw value (string, or list of strings for multi-selects)
        rules: Field name to rule; iteration order is the error order

    Returns:
        ValidationOutcome with sanitized fields and all field errors
    """
    fields: dict[str, Any] = {}
    errors: list[FieldError] = []

    for name, rule in rules.items():
        if rule.multiple:
            value, field_errors = _validate_multiple(name, raw.get(name), rule)
        else:
            value, field_errors = _validate_single(name, raw.get(name), rule)
        fields[name] = value
        errors.extend(field_errors)

    return ValidationOutcome(fields=fields, errors=tuple(errors))
