"""Observability module.

Provides structured logging, request correlation, metrics and health checks.
"""

from .logging_config import (
    configure_logging,
    get_logger,
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
)
from .metrics import (
    cart_validations_total,
    cart_validation_issues_total,
    cart_validation_duration_seconds,
    cart_validation_lines,
)
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Metrics
    "cart_validations_total",
    "cart_validation_issues_total",
    "cart_validation_duration_seconds",
    "cart_validation_lines",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
