"""Initial storefront schema

Revision ID: 3f2a9c1d7e10
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# Revision identifiers used by Alembic
revision: str = '3f2a9c1d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

product_status = sa.Enum('DRAFT', 'ACTIVE', 'ARCHIVED', name='productstatus')
wick_type = sa.Enum('COTTON', 'WOOD', name='wicktype')
order_status = sa.Enum('PENDING', 'PAID', 'FULFILLED', 'SHIPPED', 'DELIVERED', 'CANCELLED', 'REFUNDED', name='orderstatus')
adjustment_reason = sa.Enum('RESTOCK', 'SALE', 'DAMAGE', 'CORRECTION', 'RETURN', 'INITIAL', name='adjustmentreason')
discount_type = sa.Enum('PERCENTAGE', 'FIXED_AMOUNT', 'FREE_SHIPPING', name='discounttype')


def _id():
    return sa.Column('id', sa.String(length=36), primary_key=True)


def _created_at(index=False):
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, index=index)


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Upgrade schema."""
    # Catalog
    op.create_table(
        'categories',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        _created_at(),
    )
    op.create_table(
        'collections',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_table(
        'products',
        _id(),
        sa.Column('name', sa.String(), nullable=False, index=True),
        sa.Column('slug', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', product_status, nullable=False, server_default='ACTIVE'),
        sa.Column('scent_notes', sa.String(), nullable=True),
        sa.Column('tags', sa.String(), nullable=True),
        sa.Column('category_id', sa.String(length=36), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('collection_id', sa.String(length=36), sa.ForeignKey('collections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('cost_cents', sa.Integer(), nullable=True),
        sa.Column('compare_at_price_cents', sa.Integer(), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_limited_edition', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'variants',
        _id(),
        sa.Column('product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('vessel', sa.String(), nullable=False),
        sa.Column('size_oz', sa.Float(), nullable=False),
        sa.Column('wick_type', wick_type, nullable=False),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('cost_cents', sa.Integer(), nullable=True),
        sa.Column('compare_at_price_cents', sa.Integer(), nullable=True),
        sa.Column('sku', sa.String(), nullable=True, unique=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('stock_on_hand', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock_reserved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reorder_point', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('quantity_cap', sa.Integer(), nullable=True),
        _created_at(),
        sa.CheckConstraint('price_cents >= 0'),
    )

    # Customers and orders
    op.create_table(
        'customers',
        _id(),
        sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address1', sa.String(), nullable=True),
        sa.Column('address2', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('tags', sa.String(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('total_order_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_spent_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_order_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'orders',
        _id(),
        sa.Column('status', order_status, nullable=False, server_default='PENDING', index=True),
        sa.Column('email', sa.String(), nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address1', sa.String(), nullable=False),
        sa.Column('address2', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=False),
        sa.Column('state', sa.String(), nullable=False),
        sa.Column('postal_code', sa.String(), nullable=False),
        sa.Column('country', sa.String(), nullable=False, server_default='US'),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False),
        sa.Column('shipping_cents', sa.Integer(), nullable=False),
        sa.Column('discount_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('tax_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('refunded_cents', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('customer_id', sa.String(length=36), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('promo_code', sa.String(), nullable=True, index=True),
        sa.Column('tracking_number', sa.String(), nullable=True),
        sa.Column('carrier', sa.String(), nullable=True),
        sa.Column('idempotency_key', sa.String(), nullable=True, unique=True),
        _created_at(index=True),
        _updated_at(),
    )
    op.create_table(
        'order_items',
        _id(),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_name', sa.String(), nullable=False),
        sa.Column('variant_label', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('line_total_cents', sa.Integer(), nullable=False),
    )
    op.create_table(
        'order_notes',
        _id(),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_name', sa.String(), nullable=False),
        _created_at(),
    )
    op.create_table(
        'order_events',
        _id(),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        _created_at(),
    )

    # Inventory ledger
    op.create_table(
        'inventory_adjustments',
        _id(),
        sa.Column('variant_id', sa.String(length=36), sa.ForeignKey('variants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quantity_change', sa.Integer(), nullable=False),
        sa.Column('reason', adjustment_reason, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('previous_on_hand', sa.Integer(), nullable=False),
        sa.Column('new_on_hand', sa.Integer(), nullable=False),
        sa.Column('author_name', sa.String(), nullable=False),
        _created_at(index=True),
    )

    # Promotions, audit, settings, admin users
    op.create_table(
        'promotions',
        _id(),
        sa.Column('code', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('discount_type', discount_type, nullable=False),
        sa.Column('discount_value', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_spend_cents', sa.Integer(), nullable=True),
        sa.Column('max_usage_count', sa.Integer(), nullable=True),
        sa.Column('used_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('applies_to_product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True),
        sa.Column('applies_to_collection_id', sa.String(length=36), sa.ForeignKey('collections.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_email', sa.String(), nullable=True),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )
    op.create_table(
        'audit_logs',
        _id(),
        sa.Column('entity_type', sa.String(length=50), nullable=False, index=True),
        sa.Column('entity_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('action', sa.String(length=50), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('author_name', sa.String(), nullable=False),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('before_data', sa.JSON(), nullable=True),
        sa.Column('after_data', sa.JSON(), nullable=True),
        _created_at(index=True),
    )
    op.create_table(
        'settings',
        sa.Column('key', sa.String(), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
    )
    op.create_table(
        'admin_users',
        _id(),
        sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='ADMIN'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('reset_token', sa.String(), nullable=True),
        sa.Column('reset_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
    )

    # Marketing
    op.create_table(
        'campaigns',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('segment', sa.String(length=20), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('promo_code', sa.String(), nullable=True),
        sa.Column('recipient_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='DRAFT'),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_table(
        'automation_templates',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('trigger_type', sa.String(length=30), nullable=False, index=True),
        sa.Column('delay_hours', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('upsell_product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'automation_sends',
        _id(),
        sa.Column('template_id', sa.String(length=36), sa.ForeignKey('automation_templates.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('customer_id', sa.String(length=36), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_email', sa.String(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING', index=True),
        sa.Column('scheduled_for', sa.DateTime(timezone=True), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    # Reviews and waitlist
    op.create_table(
        'reviews',
        _id(),
        sa.Column('product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('customer_id', sa.String(length=36), sa.ForeignKey('customers.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_email', sa.String(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('approved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('incentive_coupon_code', sa.String(), nullable=True),
        sa.Column('order_id', sa.String(length=36), sa.ForeignKey('orders.id', ondelete='SET NULL'), nullable=True),
        _created_at(),
        sa.CheckConstraint('rating >= 1 AND rating <= 5'),
    )
    op.create_table(
        'waitlist_entries',
        _id(),
        sa.Column('product_id', sa.String(length=36), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('notified', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'waitlist_entries', 'reviews', 'automation_sends', 'automation_templates', 'campaigns',
        'admin_users', 'settings', 'audit_logs', 'promotions', 'inventory_adjustments',
        'order_events', 'order_notes', 'order_items', 'orders', 'customers',
        'variants', 'products', 'collections', 'categories',
    ):
        op.drop_table(table)
    bind = op.get_bind()
    for enum in (discount_type, adjustment_reason, order_status, wick_type, product_status):
        enum.drop(bind, checkfirst=True)
