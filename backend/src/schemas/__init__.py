"""Pydantic Schemas for the cart reconciliation API"""

from .cart_validation import (
    ValidateCartRequest,
    ReportSummaryResponse,
    ValidationReportResponse,
    CartValidationResponse,
    ErrorResponse,
)

__all__ = [
    "ValidateCartRequest",
    "ReportSummaryResponse",
    "ValidationReportResponse",
    "CartValidationResponse",
    "ErrorResponse",
]
