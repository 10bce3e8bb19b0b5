"""Cart reconciliation domain module.

Reconciles a persisted shopping cart against live catalog state and
produces a structured validation report.
"""

from .models import (
    ActionType,
    CartLineItem,
    CartStatus,
    CatalogRecord,
    Issue,
    IssueAction,
    IssueKind,
    LineResult,
    OptionAction,
    ReconciliationOutcome,
    ReportStatus,
    ReportSummary,
    ValidationReport
)
from .errors import CatalogUnavailableError, ReconciliationError
from .port import CartStorePort, CatalogLookupPort
from .engine import ReconciliationEngine

__all__ = [
    "ActionType",
    "CartLineItem",
    "CartStatus",
    "CatalogRecord",
    "Issue",
    "IssueAction",
    "IssueKind",
    "LineResult",
    "OptionAction",
    "ReconciliationOutcome",
    "ReportStatus",
    "ReportSummary",
    "ValidationReport",
    "CatalogUnavailableError",
    "ReconciliationError",
    "CartStorePort",
    "CatalogLookupPort",
    "ReconciliationEngine",
]
