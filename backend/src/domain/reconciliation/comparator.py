"""Line Comparator: computes raw divergence facts for one cart line.

Evaluation order:
1. No catalog record -> only exists=False, nothing else evaluated
2. Inactive record -> is_active=False, remaining dimensions still computed
3. Price delta (current - captured), percentage to 2 places
4. Stock: available == 0 -> out of stock, available < requested -> insufficient
5. Max allowed, independent of stock
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .models import (
    CartLineItem,
    CatalogRecord,
    LineFacts,
    PriceDelta,
    StockFacts,
    StockStatus
)


PERCENT_PRECISION = Decimal("0.01")


def compute_price_delta(old: Decimal, new: Decimal) -> PriceDelta:
    """Compute the difference between captured and current unit price.

    Args:
        old: Price captured when the item was added
        new: Current catalog price

    Returns:
        PriceDelta; percentage_change is None when old is zero
    """
    old = Decimal(str(old))
    new = Decimal(str(new))
    difference = new - old

    percentage: Optional[Decimal] = None
    if old != 0:
        percentage = (difference / old * 100).quantize(PERCENT_PRECISION, rounding=ROUND_HALF_UP)

    return PriceDelta(old=old, new=new, difference=difference, percentage_change=percentage)


def compute_stock_status(available: int, requested: int) -> StockStatus:
    # out-of-stock wins even though insufficient is also numerically true
    if available <= 0:
        return StockStatus.OUT_OF_STOCK
    if available < requested:
        return StockStatus.INSUFFICIENT
    return StockStatus.SUFFICIENT


def compare_line(item: CartLineItem, record: Optional[CatalogRecord]) -> LineFacts:
    """Compare one cart line against its resolved catalog record.

    Args:
        item: Persisted cart line
        record: Matching catalog record, or None if it did not resolve

    Returns:
        LineFacts describing every divergence dimension
    """
    if record is None:
        return LineFacts(exists=False)

    available = max(record.store_quantity or 0, 0)
    stock = StockFacts(
        status=compute_stock_status(available, item.quantity),
        available=available,
        requested=item.quantity
    )

    max_allowed = record.max_allowed
    exceeds_max = max_allowed is not None and item.quantity > max_allowed

    return LineFacts(
        exists=True,
        is_active=record.is_active,
        price=compute_price_delta(item.unit_price, record.our_price),
        stock=stock,
        exceeds_max_allowed=exceeds_max,
        max_allowed=max_allowed
    )
