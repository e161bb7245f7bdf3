"""
Prometheus Metrics for the Callback Authentication Service

Provides counters and histograms for:
- Callback round-trips and their classification
- Default record loads
- Resolution outcomes per login
"""

from prometheus_client import Counter, Histogram

# ── Callback metrics ────────────────────────────────────────────

CALLBACK_REQUESTS_TOTAL = Counter(
    "callback_auth_callback_requests_total",
    "Total callback invocations",
    ["status"],  # status: success | empty | invalid_response | rejected | transport_error
)

CALLBACK_LATENCY = Histogram(
    "callback_auth_callback_latency_seconds",
    "Callback round-trip latency",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, float("inf")],
)

# ── Default record metrics ──────────────────────────────────────

DEFAULT_RECORD_LOADS_TOTAL = Counter(
    "callback_auth_default_record_loads_total",
    "Default record load attempts",
    ["result"],  # result: loaded | cached | missing | invalid
)

# ── Resolution metrics ──────────────────────────────────────────

RESOLUTIONS_TOTAL = Counter(
    "callback_auth_resolutions_total",
    "Login resolutions by the source of the resulting record",
    ["source"],  # source: mock | callback | default | rejected | none
)
