"""Prometheus metrics for the notes engine.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Note operations
# ---------------------------------------------------------------------------

NOTE_OPERATIONS = Counter(
    "notes_operations_total",
    "Total number of note store operations",
    ["operation", "outcome"],  # outcome: applied, skipped, not_found
)

NOTES_STORED = Gauge(
    "notes_stored",
    "Number of notes currently held in the store",
)

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

STORAGE_WRITES = Counter(
    "notes_storage_writes_total",
    "Total writes to the storage backend",
    ["key"],
)

STORAGE_LOAD_FAILURES = Counter(
    "notes_storage_load_failures_total",
    "Stored values that could not be parsed and were replaced by defaults",
    ["key"],
)

STORAGE_WRITE_DURATION = Histogram(
    "notes_storage_write_duration_seconds",
    "Duration of storage backend writes in seconds",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)
