"""Prometheus metrics for cart reconciliation."""

from prometheus_client import Counter, Histogram

cart_validations_total = Counter(
    "cartcheck_cart_validations_total",
    "Total cart validations",
    ["outcome"]  # outcome: valid|invalid|price_updated|cart_not_found|cart_empty|catalog_unavailable
)

cart_validation_issues_total = Counter(
    "cartcheck_cart_validation_issues_total",
    "Issues found during cart validation",
    ["kind"]
)

cart_validation_duration_seconds = Histogram(
    "cartcheck_cart_validation_duration_seconds",
    "Time spent reconciling one cart in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

cart_validation_lines = Histogram(
    "cartcheck_cart_validation_lines",
    "Number of line items per validated cart",
    buckets=[0, 1, 5, 10, 25, 50, 100, 250]
)
