"""Prometheus metrics for the note store.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Connection metrics
# ---------------------------------------------------------------------------

STORE_OPENS = Counter(
    "notes_store_opens_total",
    "Total number of database opens",
    ["schema_created"],
)

# ---------------------------------------------------------------------------
# Operation metrics
# ---------------------------------------------------------------------------

STORE_OPERATIONS = Counter(
    "notes_store_operations_total",
    "Total record store operations",
    ["operation", "status"],  # status: success, error
)

STORE_DURATION = Histogram(
    "notes_store_operation_duration_seconds",
    "Duration of record store operations in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
)
