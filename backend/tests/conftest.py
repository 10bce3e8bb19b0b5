"""Pytest fixtures for cart reconciliation tests.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database
- Seeding helpers for product master rows and saved carts
- A TestClient wired to the test database

Usage:
    def test_validate(client, seed_product, seed_cart):
        seed_product("2390", our_price="18")
        seed_cart([{"p_code": "2390", "quantity": 2, "unit_price": "18"}])
        response = client.post("/api/cart/validate-cart", ...)
"""

import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("CATALOG_FETCH_TIMEOUT_SECONDS", "5")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from database import engine, SessionLocal, get_db as database_get_db
from models.base import Base
from models.cart import Cart, CartItem
from models.product_master import ProductMaster

from fixtures.reconciliation import SHOPPER, STORE, PROJECT


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seed_product(db_session: Session):
    """Factory inserting a product_master row"""

    def _seed(
        p_code: str,
        our_price="100",
        store_quantity: int = 50,
        pcode_status: str = "Y",
        max_quantity_allowed=None,
        store_code: str = STORE,
        product_name: str = None
    ) -> ProductMaster:
        product = ProductMaster(
            p_code=p_code,
            store_code=store_code,
            product_name=product_name or f"Product {p_code}",
            package_size=Decimal("250"),
            package_unit="GM",
            product_mrp=Decimal(str(our_price)) + 10,
            our_price=Decimal(str(our_price)),
            brand_name="INDIAN CHASKA",
            pcode_status=pcode_status,
            store_quantity=store_quantity,
            max_quantity_allowed=max_quantity_allowed,
            pcode_img=f"https://cdn.example.com/{p_code}.jpg"
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _seed


@pytest.fixture
def seed_cart(db_session: Session):
    """Factory inserting a saved cart with its items in the given order"""

    def _seed(
        items: list[dict],
        mobile_no: str = SHOPPER,
        store_code: str = STORE,
        project_code: str = PROJECT
    ) -> Cart:
        cart = Cart(mobile_no=mobile_no, store_code=store_code, project_code=project_code)
        for position, item in enumerate(items):
            cart.items.append(CartItem(
                position=position,
                p_code=item["p_code"],
                product_name=item.get("product_name", f"Product {item['p_code']}"),
                quantity=item.get("quantity", 1),
                unit_price=Decimal(str(item.get("unit_price", "100"))),
                package_unit=item.get("package_unit", "GM"),
                brand_name=item.get("brand_name"),
                store_code=store_code
            ))
        db_session.add(cart)
        db_session.commit()
        return cart

    return _seed


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient with get_db overridden to use the test session"""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[database_get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def shopper_headers() -> dict[str, str]:
    return {"X-Shopper-Key": SHOPPER}
