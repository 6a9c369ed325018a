"""Custom metrics for the Local Library catalog."""

import logfire

catalog_outcomes = logfire.metric_counter(
    "catalog.outcomes",
    description="Non-persist outcomes of catalog use cases (invalid, redirect, blocked)",
)

store_call_duration = logfire.metric_histogram(
    "catalog.store.duration_ms",
    unit="ms",
    description="Duration of gateway calls into the store by entity and operation",
)


def record_outcome(entity: str, outcome: str) -> None:
    """Record an invalid form, duplicate redirect or blocked delete."""
    catalog_outcomes.add(1, {"entity": entity, "outcome": outcome})
