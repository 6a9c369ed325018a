"""Span around one gateway call into the store."""

import time
from contextlib import contextmanager

import logfire

from .metrics import store_call_duration


@contextmanager
def trace_store_call(entity: str, operation: str):
    """Trace and time one store call, e.g. ``genre``/``find_by_id``."""
    started = time.perf_counter()
    with logfire.span(
        "store {entity}.{operation}",
        entity=entity,
        operation=operation,
        db_system="sqlite",
    ) as span:
        try:
            yield span
        except Exception as e:
            span.set_attribute("store.error_type", type(e).__name__)
            raise
        finally:
            store_call_duration.record(
                (time.perf_counter() - started) * 1000,
                {"entity": entity, "operation": operation},
            )
