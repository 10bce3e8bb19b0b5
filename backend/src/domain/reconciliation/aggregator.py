"""Report Aggregator: folds per-line results into the ValidationReport.

Pure and deterministic. Lines are partitioned into fully valid,
price-updated-but-valid, and invalid, preserving cart order within each
bucket. Lines that are invalid never appear in the price-updated bucket.
"""

from typing import Sequence

from .models import (
    IssueKind,
    LineResult,
    ReportStatus,
    ReportSummary,
    STOCK_ISSUE_KINDS,
    ValidationReport
)


def summarize(lines: Sequence[LineResult]) -> ReportSummary:
    """OR-reduce the summary flags across all lines' issue kinds"""
    kinds = set()
    any_blocking = False
    for line in lines:
        kinds.update(line.issue_kinds)
        any_blocking = any_blocking or not line.valid

    has_price_changes = IssueKind.PRICE_CHANGED in kinds
    return ReportSummary(
        has_price_changes=has_price_changes,
        has_stock_issues=bool(kinds & STOCK_ISSUE_KINDS),
        has_out_of_stock=IssueKind.OUT_OF_STOCK in kinds,
        requires_action=any_blocking or has_price_changes
    )


def describe(
    invalid_items: Sequence[LineResult],
    updated_items: Sequence[LineResult]
) -> tuple[ReportStatus, str]:
    """Derive the overall status and message shown to the shopper.

    Precedence: out of stock, insufficient stock, other invalid lines,
    price changes, success.
    """
    if invalid_items:
        out_of_stock = sum(1 for line in invalid_items if IssueKind.OUT_OF_STOCK in line.issue_kinds)
        insufficient = sum(
            1 for line in invalid_items if IssueKind.INSUFFICIENT_STOCK in line.issue_kinds
        )
        if out_of_stock:
            message = f"{out_of_stock} product(s) out of stock"
        elif insufficient:
            message = f"{insufficient} product(s) have insufficient stock"
        else:
            message = f"{len(invalid_items)} product(s) need attention"
        return ReportStatus.INVALID, message

    if updated_items:
        return ReportStatus.PRICE_UPDATED, f"{len(updated_items)} product(s) have price changes"

    return ReportStatus.VALID, "Cart validation successful"


def build_report(lines: Sequence[LineResult]) -> ValidationReport:
    """Aggregate line results into the final report.

    Args:
        lines: Per-line results in cart order

    Returns:
        ValidationReport
    """
    invalid_items = tuple(line for line in lines if not line.valid)
    updated_items = tuple(line for line in lines if line.price_update is not None)
    total_invalid = len(invalid_items)
    status, message = describe(invalid_items, updated_items)

    return ValidationReport(
        valid=total_invalid == 0,
        total_items=len(lines),
        valid_items=len(lines) - total_invalid,
        total_invalid_items=total_invalid,
        invalid_items=invalid_items,
        updated_items=updated_items,
        summary=summarize(lines),
        status=status,
        message=message
    )


def empty_report(message: str) -> ValidationReport:
    """Report returned for a missing or empty cart"""
    return ValidationReport(
        valid=True,
        total_items=0,
        valid_items=0,
        total_invalid_items=0,
        message=message
    )
