"""Catalog repository resolving product codes against product_master"""

import asyncio
from decimal import Decimal
from typing import Callable, Iterable, Optional

from sqlalchemy import select, text
from sqlalchemy.orm import Session

from models.product_master import ProductMaster
from domain.reconciliation.models import CatalogRecord
from domain.reconciliation.port import CatalogLookupPort


class SqlCatalogLookup(CatalogLookupPort):
    """Catalog lookup backed by the product_master table.

    Resolves all codes with a single IN query, run in the default executor
    so the event loop is not blocked. Inactive products are returned.

    The fetch opens its own short-lived session from `session_factory`.
    A caller that stops waiting (resolver timeout) can close its request
    session while the worker thread is still running; the worker never
    touches that session. On PostgreSQL the query is also bounded by a
    server-side statement timeout.

    Args:
        session_factory: Callable returning a new Session (e.g. SessionLocal)
        statement_timeout_seconds: Server-side bound for the query (None = no bound)
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        statement_timeout_seconds: Optional[float] = None
    ):
        self.session_factory = session_factory
        self.statement_timeout_seconds = statement_timeout_seconds

    async def resolve_many(
        self,
        store_code: str,
        product_codes: Iterable[str]
    ) -> dict[str, CatalogRecord]:
        codes = list(product_codes)
        if not codes:
            return {}

        def _fetch() -> dict[str, CatalogRecord]:
            with self.session_factory() as session:
                apply_statement_timeout(session, self.statement_timeout_seconds)
                query = select(ProductMaster).where(
                    ProductMaster.store_code == store_code,
                    ProductMaster.p_code.in_(codes)
                )
                rows = session.execute(query).scalars().all()
                # Converted before the session closes
                return {row.p_code: to_catalog_record(row) for row in rows}

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, _fetch)


def apply_statement_timeout(session: Session, timeout_seconds: Optional[float]) -> None:
    """Bound the current transaction's statements on PostgreSQL.

    SET LOCAL only lasts until the fetch session's transaction ends. Other
    dialects have no equivalent and are left unbounded.
    """
    if not timeout_seconds:
        return
    if session.get_bind().dialect.name != "postgresql":
        return
    timeout_ms = max(int(timeout_seconds * 1000), 1)
    session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))


def _decimal_or_none(value) -> Optional[Decimal]:
    return Decimal(str(value)) if value is not None else None


def to_catalog_record(row: ProductMaster) -> CatalogRecord:
    """Convert a product_master row to the domain CatalogRecord"""
    return CatalogRecord(
        p_code=row.p_code,
        our_price=Decimal(str(row.our_price)),
        is_active=row.is_active,
        store_quantity=row.store_quantity or 0,
        max_quantity_allowed=row.max_quantity_allowed,
        product_mrp=_decimal_or_none(row.product_mrp),
        product_name=row.product_name,
        product_description=row.product_description,
        brand_name=row.brand_name,
        package_size=_decimal_or_none(row.package_size),
        package_unit=row.package_unit,
        pcode_img=row.pcode_img,
        barcode=row.barcode,
        store_code=row.store_code
    )
