"""
Prometheus metrics for data-access calls (monitoring & observability).
Exposed by the API at /metrics.
"""

from prometheus_client import Counter, Histogram

DATA_ACCESS_OPERATIONS = Counter(
    "dbinteraction_operations_total",
    "Data-access operations by name and outcome (ok or an ErrorKind value).",
    ["operation", "outcome"],
)

DATA_ACCESS_LATENCY = Histogram(
    "dbinteraction_operation_seconds",
    "Wall time of data-access operations, including connection checkout.",
    ["operation"],
)
