"""Create product_master, cart and cart_item tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create product_master table (live catalog state per store)
    op.create_table(
        'product_master',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('p_code', sa.Text(), nullable=False),
        sa.Column('store_code', sa.Text(), nullable=False),
        sa.Column('barcode', sa.Text(), nullable=True),
        sa.Column('product_name', sa.Text(), nullable=False),
        sa.Column('product_description', sa.Text(), nullable=True),
        sa.Column('package_size', sa.Numeric(precision=10, scale=3), nullable=True),
        sa.Column('package_unit', sa.Text(), nullable=True),
        sa.Column('product_mrp', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('our_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('brand_name', sa.Text(), nullable=True),
        sa.Column('pcode_status', sa.Text(), nullable=False, server_default='Y'),
        sa.Column('dept_id', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Text(), nullable=True),
        sa.Column('sub_category_id', sa.Text(), nullable=True),
        sa.Column('store_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_quantity_allowed', sa.Integer(), nullable=True),
        sa.Column('pcode_img', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('store_code', 'p_code', name='uq_product_master_store_pcode'),
        sa.CheckConstraint("pcode_status IN ('Y', 'N')", name='ck_product_master_pcode_status')
    )

    op.create_index('ix_product_master_store_code', 'product_master', ['store_code'])
    op.create_index('ix_product_master_pcode_status', 'product_master', ['pcode_status'])

    # Create cart table (one saved cart per shopper, store and project)
    op.create_table(
        'cart',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('mobile_no', sa.Text(), nullable=False),
        sa.Column('store_code', sa.Text(), nullable=False),
        sa.Column('project_code', sa.Text(), nullable=False),
        sa.Column('last_updated', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('mobile_no', 'store_code', 'project_code', name='uq_cart_shopper_store_project')
    )

    op.create_index('ix_cart_last_updated', 'cart', ['last_updated'])

    # Create cart_item table (captured price and attributes per line)
    op.create_table(
        'cart_item',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('cart_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('p_code', sa.Text(), nullable=False),
        sa.Column('product_name', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('package_size', sa.Numeric(precision=10, scale=3), nullable=True),
        sa.Column('package_unit', sa.Text(), nullable=True),
        sa.Column('brand_name', sa.Text(), nullable=True),
        sa.Column('pcode_img', sa.Text(), nullable=True),
        sa.Column('store_code', sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['cart_id'], ['cart.id'], ondelete='CASCADE'),
        sa.CheckConstraint('quantity >= 1', name='ck_cart_item_quantity_positive'),
        sa.CheckConstraint('unit_price >= 0', name='ck_cart_item_unit_price_non_negative')
    )

    op.create_index('ix_cart_item_cart_id', 'cart_item', ['cart_id'])
    op.create_index('ix_cart_item_p_code', 'cart_item', ['p_code'])


def downgrade():
    op.drop_index('ix_cart_item_p_code', table_name='cart_item')
    op.drop_index('ix_cart_item_cart_id', table_name='cart_item')
    op.drop_table('cart_item')

    op.drop_index('ix_cart_last_updated', table_name='cart')
    op.drop_table('cart')

    op.drop_index('ix_product_master_pcode_status', table_name='product_master')
    op.drop_index('ix_product_master_store_code', table_name='product_master')
    op.drop_table('product_master')
