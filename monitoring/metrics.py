"""
Prometheus metrics for the sandbox tester.

Tracks:
- pawaPay API calls by operation and outcome
- pawaPay API call duration
- Orchestration outcomes by transaction type and failing step
- Transaction log writes
"""
from prometheus_client import Counter, Histogram

# pawaPay API metrics
pawapay_api_requests_total = Counter(
    "pawapay_api_requests_total",
    "Total pawaPay API requests",
    ["operation", "status"],  # status: success, http_error, transport_error, malformed
)

pawapay_api_duration_seconds = Histogram(
    "pawapay_api_duration_seconds",
    "pawaPay API call duration in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
)

# Orchestration metrics
transactions_submitted_total = Counter(
    "transactions_submitted_total",
    "Total transaction submissions by outcome",
    ["transaction_type", "outcome"],  # outcome: success, validation, upstream, resolution, persistence
)

orchestration_failures_total = Counter(
    "orchestration_failures_total",
    "Orchestration failures by failing step",
    ["step"],
)

# Transaction log metrics
transaction_log_writes_total = Counter(
    "transaction_log_writes_total",
    "Total transaction log appends",
    ["status"],  # success, failed
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_pawapay_api_call(
        operation: str, status: str, duration_seconds: float
    ) -> None:
        """Record a pawaPay API call."""
        pawapay_api_requests_total.labels(operation=operation, status=status).inc()
        pawapay_api_duration_seconds.labels(operation=operation).observe(duration_seconds)

    @staticmethod
    def record_submission(transaction_type: str, outcome: str, step: str | None = None) -> None:
        """Record the outcome of a deposit, payout or refund submission."""
        transactions_submitted_total.labels(
            transaction_type=transaction_type, outcome=outcome
        ).inc()
        if step is not None:
            orchestration_failures_total.labels(step=step).inc()

    @staticmethod
    def record_log_write(status: str) -> None:
        """Record a transaction log append."""
        transaction_log_writes_total.labels(status=status).inc()


# Export singleton instance
metrics = MetricsCollector()
