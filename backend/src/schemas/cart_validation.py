"""Pydantic schemas for the cart validation API"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from domain.reconciliation.models import CartStatus, ReconciliationOutcome, ReportStatus


class ValidateCartRequest(BaseModel):
    """Request body for POST /api/cart/validate-cart"""
    store_code: str = Field(..., description="Store the cart belongs to", examples=["AVB"])
    project_code: str = Field(..., description="Project the cart belongs to", examples=["PROJ001"])

    @field_validator("store_code", "project_code")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} is required")
        return value


class ReportSummaryResponse(BaseModel):
    """Boolean flags for quick client-side checks"""
    hasPriceChanges: bool
    hasStockIssues: bool
    hasOutOfStock: bool
    requiresAction: bool


class ValidationReportResponse(BaseModel):
    """The validation report.

    Line entries are rendered by the domain (issues are a tagged union keyed
    by `kind`, each carrying only its own fields).
    """
    valid: bool
    totalItems: int
    validItems: int
    totalInvalidItems: int
    invalidItems: list[dict[str, Any]] = Field(default_factory=list)
    updatedItems: list[dict[str, Any]] = Field(default_factory=list)
    summary: ReportSummaryResponse


class CartValidationResponse(BaseModel):
    """Response envelope for cart validation"""
    success: bool = True
    message: str
    status: ReportStatus
    cart_status: CartStatus
    store_code: str
    project_code: str
    mobile_no: str
    validation: ValidationReportResponse

    class Config:
        use_enum_values = True

    @classmethod
    def from_outcome(
        cls,
        outcome: ReconciliationOutcome,
        store_code: str,
        project_code: str,
        mobile_no: str
    ) -> "CartValidationResponse":
        report = outcome.report
        return cls(
            message=report.message,
            status=report.status,
            cart_status=outcome.status,
            store_code=store_code,
            project_code=project_code,
            mobile_no=mobile_no,
            validation=ValidationReportResponse(**report.to_dict())
        )


class ErrorResponse(BaseModel):
    """Error envelope"""
    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[list[dict[str, Any]]] = None
