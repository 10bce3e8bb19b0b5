"""FastAPI dependencies wiring the reconciliation engine to its collaborators.

This module provides:
- get_shopper_key: Shopper identity taken from the X-Shopper-Key header
- get_cart_store / get_catalog_lookup: SQL-backed collaborator ports
- get_reconciliation_engine: Engine built per request (no shared state)
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from config import Settings, get_settings
from database import get_db, get_session_factory
from domain.reconciliation.engine import ReconciliationEngine
from domain.reconciliation.port import CartStorePort, CatalogLookupPort
from infrastructure.repositories.cart_repository import SqlCartStore
from infrastructure.repositories.catalog_repository import SqlCatalogLookup


def get_shopper_key(x_shopper_key: str = Header(..., alias="X-Shopper-Key")) -> str:
    """Extract the shopper key (mobile number) from the request headers.

    Authentication is handled upstream; the gateway forwards the verified
    shopper identity in this header.

    Raises:
        HTTPException 400: If the header is blank
    """
    shopper_key = x_shopper_key.strip()
    if not shopper_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Shopper-Key header is required",
        )
    return shopper_key


def get_cart_store(db: Session = Depends(get_db)) -> CartStorePort:
    return SqlCartStore(db)


def get_catalog_lookup(
    session_factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings)
) -> CatalogLookupPort:
    return SqlCatalogLookup(
        session_factory,
        statement_timeout_seconds=settings.CATALOG_FETCH_TIMEOUT_SECONDS
    )


def get_reconciliation_engine(
    cart_store: CartStorePort = Depends(get_cart_store),
    catalog: CatalogLookupPort = Depends(get_catalog_lookup),
    settings: Settings = Depends(get_settings)
) -> ReconciliationEngine:
    """Build a reconciliation engine for the current request.

    Example:
        @router.post("/validate-cart")
        async def validate(engine: ReconciliationEngine = Depends(get_reconciliation_engine)):
            outcome = await engine.validate(shopper_key, store_code, project_code)
    """
    return ReconciliationEngine(
        cart_store=cart_store,
        catalog=catalog,
        catalog_timeout_seconds=settings.CATALOG_FETCH_TIMEOUT_SECONDS,
        currency_symbol=settings.CURRENCY_SYMBOL
    )
