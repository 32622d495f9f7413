"""Prometheus metrics for monitoring registrations, commissions, and failures"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Registration metrics
transaction_counter = Counter(
    "transactions_registered_total",
    "Total transactions registered",
    ["rate"],  # applied commission rate, e.g. 0.02 | 0.05
)

commission_counter = Counter(
    "commission_collected_total",
    "Sum of commissions charged on registered transactions",
)

amount_histogram = Histogram(
    "transaction_amount",
    "Registered transaction amounts",
    buckets=[100, 1_000, 5_000, 10_000, 50_000, 100_000, 1_000_000],
)

# Failure metrics
rule_evaluation_failures_counter = Counter(
    "rule_evaluation_failures_total",
    "Amounts that matched no commission rule",
)

storage_failures_counter = Counter(
    "storage_failures_total",
    "Failed transaction store operations",
    ["operation"],  # save | find_all
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(amount: Decimal, rate: Decimal, commission: Decimal) -> None:
    """Record registration metrics for volume and commission tracking"""
    transaction_counter.labels(rate=str(rate)).inc()
    commission_counter.inc(float(commission))
    amount_histogram.observe(float(amount))
