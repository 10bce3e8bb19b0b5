"""ReconciliationEngine - validates a saved cart against the live catalog.

Loads the cart, resolves a fresh catalog snapshot in one batch, compares
and classifies every line, then aggregates the report. Read-only: the
persisted cart is never modified.
"""

import asyncio
import logging
from typing import Optional

from .aggregator import build_report, empty_report
from .classifier import classify_line
from .comparator import compare_line
from .models import (
    CartLineItem,
    CartStatus,
    CatalogRecord,
    LineResult,
    ReconciliationOutcome
)
from .port import CartStorePort, CatalogLookupPort
from .resolver import CatalogSnapshotResolver
from .suggestions import DEFAULT_CURRENCY_SYMBOL


logger = logging.getLogger(__name__)

CART_NOT_FOUND_MESSAGE = "No saved cart found"
CART_EMPTY_MESSAGE = "Cart is empty"


def mask_shopper_key(shopper_key: str) -> str:
    """Mask a shopper key for logging, keeping the last four characters"""
    if len(shopper_key) <= 4:
        return "*" * len(shopper_key)
    return "*" * (len(shopper_key) - 4) + shopper_key[-4:]


def reconcile_line(
    index: int,
    item: CartLineItem,
    record: Optional[CatalogRecord],
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
) -> LineResult:
    """Compare and classify one cart line"""
    facts = compare_line(item, record)
    issues = classify_line(item, facts, currency_symbol)
    return LineResult(
        index=index,
        item=item,
        record=record,
        facts=facts,
        issues=tuple(issues)
    )


class ReconciliationEngine:
    """Validation orchestrator.

    Holds no state between calls; concurrent validations are independent.

    Args:
        cart_store: Cart store collaborator
        catalog: Catalog lookup collaborator
        catalog_timeout_seconds: Bound for the batched catalog fetch
        currency_symbol: Symbol used in price messages
    """

    def __init__(
        self,
        cart_store: CartStorePort,
        catalog: CatalogLookupPort,
        catalog_timeout_seconds: Optional[float] = None,
        currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    ):
        self.cart_store = cart_store
        self.resolver = CatalogSnapshotResolver(catalog, timeout_seconds=catalog_timeout_seconds)
        self.currency_symbol = currency_symbol

    async def validate(
        self,
        shopper_key: str,
        store_code: str,
        project_code: str
    ) -> ReconciliationOutcome:
        """Reconcile a shopper's saved cart against the live catalog.

        Args:
            shopper_key: Shopper identifier (mobile number)
            store_code: Store code
            project_code: Project code

        Returns:
            ReconciliationOutcome with the cart status and the report

        Raises:
            CatalogUnavailableError: If the catalog snapshot cannot be resolved
        """
        masked = mask_shopper_key(shopper_key)
        # Cart store is synchronous
        loop = asyncio.get_event_loop()
        items = await loop.run_in_executor(
            None, self.cart_store.load_cart, shopper_key, store_code, project_code
        )

        if items is None:
            logger.info(f"No saved cart for shopper {masked} in store {store_code}")
            return ReconciliationOutcome(
                status=CartStatus.CART_NOT_FOUND,
                report=empty_report(CART_NOT_FOUND_MESSAGE)
            )

        if not items:
            logger.info(f"Cart is empty for shopper {masked} in store {store_code}")
            return ReconciliationOutcome(
                status=CartStatus.CART_EMPTY,
                report=empty_report(CART_EMPTY_MESSAGE)
            )

        snapshot = await self.resolver.resolve(store_code, (item.p_code for item in items))

        lines = []
        for index, item in enumerate(items):
            line = reconcile_line(index, item, snapshot.get(item.p_code), self.currency_symbol)
            logger.debug(
                f"Line {index} ({item.p_code}): valid={line.valid}, "
                f"issues={[issue.kind.value for issue in line.issues]}"
            )
            lines.append(line)

        report = build_report(lines)

        logger.info(
            f"Cart validation for shopper {masked} in store {store_code}: "
            f"valid={report.valid}, total={report.total_items}, "
            f"invalid={report.total_invalid_items}, updated={len(report.updated_items)}",
            extra={"store_code": store_code, "shopper_key": masked}
        )

        return ReconciliationOutcome(status=CartStatus.OK, report=report)
