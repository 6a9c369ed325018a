"""Decorators for tracing catalog controller operations."""

import functools
from collections.abc import Callable
from datetime import datetime

import logfire

from ..outcomes import ErrorResult, RedirectResult, ViewResult


def _describe_result(span, result) -> None:
    if isinstance(result, ViewResult):
        span.set_attribute("controller.template", result.template)
    elif isinstance(result, RedirectResult):
        span.set_attribute("controller.location", result.location)
    elif isinstance(result, ErrorResult):
        span.set_attribute("controller.error_kind", result.kind.value)


def trace_controller(entity: str, operation: str):
    """Decorator to trace one controller use case (e.g. ``genre``/``delete_post``)."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            with logfire.span(
                f"controller.{entity}.{operation}",
                entity=entity,
                operation=operation,
            ) as span:
                start_time = datetime.now()

                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("controller.success", False)
                    span.set_attribute("controller.error", str(e))
                    raise

                span.set_attribute("controller.success", True)
                span.set_attribute("controller.result", type(result).__name__)
                _describe_result(span, result)
                span.set_attribute(
                    "controller.duration_ms", (datetime.now() - start_time).total_seconds() * 1000
                )
                return result

        return wrapper

    return decorator
