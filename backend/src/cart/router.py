"""Cart validation API endpoints"""

import logging
import time

from fastapi import APIRouter, Depends

from dependencies import get_reconciliation_engine, get_shopper_key
from domain.reconciliation.engine import ReconciliationEngine, mask_shopper_key
from domain.reconciliation.errors import CatalogUnavailableError
from domain.reconciliation.models import CartStatus, ReconciliationOutcome
from observability.metrics import (
    cart_validations_total,
    cart_validation_issues_total,
    cart_validation_duration_seconds,
    cart_validation_lines,
)
from schemas.cart_validation import CartValidationResponse, ErrorResponse, ValidateCartRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _record_metrics(outcome: ReconciliationOutcome) -> None:
    if outcome.status != CartStatus.OK:
        cart_validations_total.labels(outcome=outcome.status.value.lower()).inc()
        return

    report = outcome.report
    cart_validations_total.labels(outcome=report.status.value).inc()
    cart_validation_lines.observe(report.total_items)
    for line in report.invalid_items + report.updated_items:
        for issue in line.issues:
            cart_validation_issues_total.labels(kind=issue.kind.value).inc()


@router.post(
    "/validate-cart",
    response_model=CartValidationResponse,
    responses={503: {"model": ErrorResponse}},
)
async def validate_cart(
    request: ValidateCartRequest,
    shopper_key: str = Depends(get_shopper_key),
    engine: ReconciliationEngine = Depends(get_reconciliation_engine)
):
    """
    Validate the shopper's saved cart against current product data.

    Compares every line's captured price and quantity against the live
    catalog (price, stock, active status, per-order limit) and returns the
    validation report with suggested actions. Read-only: the saved cart
    is not modified.

    Args:
        request: Store and project codes
        shopper_key: Shopper mobile number (X-Shopper-Key header)
        engine: Reconciliation engine

    Returns:
        CartValidationResponse

    Raises:
        CatalogUnavailableError: Mapped to 503 by the application handler
    """
    start = time.time()
    try:
        outcome = await engine.validate(shopper_key, request.store_code, request.project_code)
    except CatalogUnavailableError:
        cart_validations_total.labels(outcome="catalog_unavailable").inc()
        logger.error(
            f"Cart validation failed for shopper {mask_shopper_key(shopper_key)}: catalog unavailable",
            extra={"store_code": request.store_code, "error_code": CatalogUnavailableError.error_code}
        )
        raise
    finally:
        cart_validation_duration_seconds.observe(time.time() - start)

    _record_metrics(outcome)

    return CartValidationResponse.from_outcome(
        outcome,
        store_code=request.store_code,
        project_code=request.project_code,
        mobile_no=shopper_key
    )
