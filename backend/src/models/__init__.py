"""SQLAlchemy models for the cart reconciliation service"""

from .base import Base
from .product_master import ProductMaster
from .cart import Cart, CartItem

__all__ = [
    "Base",
    "ProductMaster",
    "Cart",
    "CartItem",
]
