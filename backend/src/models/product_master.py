"""ProductMaster SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Numeric, DateTime, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.sql import func

from .base import Base


class ProductMaster(Base):
    """Store-level product master data.

    Each row is the live catalog state of one product in one store: current
    price, reference (MRP) price, stock level, active flag and per-order limit.
    """
    __tablename__ = "product_master"
    __table_args__ = (
        UniqueConstraint("store_code", "p_code", name="uq_product_master_store_pcode"),
        Index("ix_product_master_store_code", "store_code"),
        Index("ix_product_master_pcode_status", "pcode_status"),
        CheckConstraint("pcode_status IN ('Y', 'N')", name="ck_product_master_pcode_status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    p_code = Column(Text, nullable=False)
    store_code = Column(Text, nullable=False)
    barcode = Column(Text, nullable=True)
    product_name = Column(Text, nullable=False)
    product_description = Column(Text, nullable=True)
    package_size = Column(Numeric(10, 3), nullable=True)
    package_unit = Column(Text, nullable=True)
    product_mrp = Column(Numeric(12, 2), nullable=False)
    our_price = Column(Numeric(12, 2), nullable=False)
    brand_name = Column(Text, nullable=True)
    pcode_status = Column(Text, nullable=False, server_default="Y")
    dept_id = Column(Text, nullable=True)
    category_id = Column(Text, nullable=True)
    sub_category_id = Column(Text, nullable=True)
    store_quantity = Column(Integer, nullable=False, server_default="0")
    max_quantity_allowed = Column(Integer, nullable=True)
    pcode_img = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @property
    def is_active(self) -> bool:
        return self.pcode_status == "Y"
