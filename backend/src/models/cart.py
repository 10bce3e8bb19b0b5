"""Cart and CartItem SQLAlchemy models"""

from sqlalchemy import Column, Integer, Text, Numeric, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class Cart(Base):
    """A shopper's saved cart.

    One cart per (mobile_no, store_code, project_code). Line items keep the
    price and attributes captured when they were added.
    """
    __tablename__ = "cart"
    __table_args__ = (
        UniqueConstraint("mobile_no", "store_code", "project_code", name="uq_cart_shopper_store_project"),
        Index("ix_cart_last_updated", "last_updated"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    mobile_no = Column(Text, nullable=False)
    store_code = Column(Text, nullable=False)
    project_code = Column(Text, nullable=False)
    last_updated = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    items = relationship(
        "CartItem",
        back_populates="cart",
        order_by="CartItem.position",
        cascade="all, delete-orphan"
    )


class CartItem(Base):
    """One line of a saved cart"""
    __tablename__ = "cart_item"
    __table_args__ = (
        Index("ix_cart_item_cart_id", "cart_id"),
        Index("ix_cart_item_p_code", "p_code"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_cart_item_unit_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    cart_id = Column(Integer, ForeignKey("cart.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    p_code = Column(Text, nullable=False)
    product_name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    package_size = Column(Numeric(10, 3), nullable=True)
    package_unit = Column(Text, nullable=True)
    brand_name = Column(Text, nullable=True)
    pcode_img = Column(Text, nullable=True)
    store_code = Column(Text, nullable=False)

    # Relationships
    cart = relationship("Cart", back_populates="items")
