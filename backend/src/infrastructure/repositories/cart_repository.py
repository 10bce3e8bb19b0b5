"""Cart repository for reading saved carts"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from models.cart import Cart, CartItem
from domain.reconciliation.models import CartLineItem
from domain.reconciliation.port import CartStorePort


class SqlCartStore(CartStorePort):
    """Cart store backed by the cart / cart_item tables.

    Read-only: reconciliation never writes the cart.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def load_cart(
        self,
        shopper_key: str,
        store_code: str,
        project_code: str
    ) -> Optional[list[CartLineItem]]:
        """Load cart lines in stored order.

        Returns:
            List of CartLineItem, [] for a cart without items, None if no cart
        """
        query = (
            select(Cart)
            .where(
                Cart.mobile_no == shopper_key,
                Cart.store_code == store_code,
                Cart.project_code == project_code
            )
            .options(selectinload(Cart.items))
        )
        cart = self.db.execute(query).scalar_one_or_none()

        if cart is None:
            return None

        return [to_line_item(item, store_code) for item in cart.items]


def to_line_item(item: CartItem, store_code: str) -> CartLineItem:
    """Convert a cart_item row to the domain CartLineItem"""
    return CartLineItem(
        p_code=item.p_code,
        quantity=item.quantity,
        unit_price=Decimal(str(item.unit_price)),
        product_name=item.product_name,
        store_code=item.store_code or store_code,
        package_size=Decimal(str(item.package_size)) if item.package_size is not None else None,
        package_unit=item.package_unit,
        brand_name=item.brand_name,
        pcode_img=item.pcode_img
    )
