"""Initial exchange schema

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2026-10-16 10:12:41.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f2a9c1d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Pharmacy identity and login
    op.create_table(
        'pharmacies',
        sa.Column('pharmacy_id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('pharmacy_name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('license_no', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('telegram', sa.String(), nullable=True),
        sa.Column('profile_pic', sa.String(), nullable=True),
        sa.Column('account_status', sa.String(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint("account_status IN ('active', 'blacklisted')"),
        sa.PrimaryKeyConstraint('pharmacy_id'),
    )
    op.create_index(op.f('ix_pharmacies_city'), 'pharmacies', ['city'], unique=False)

    op.create_table(
        'credentials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_credentials_id'), 'credentials', ['id'], unique=False)
    op.create_index(op.f('ix_credentials_email'), 'credentials', ['email'], unique=True)
    op.create_index(op.f('ix_credentials_pharmacy_id'), 'credentials', ['pharmacy_id'], unique=True)

    op.create_table(
        'system_admins',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uid', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_system_admins_id'), 'system_admins', ['id'], unique=False)
    op.create_index(op.f('ix_system_admins_uid'), 'system_admins', ['uid'], unique=True)
    op.create_index(op.f('ix_system_admins_email'), 'system_admins', ['email'], unique=True)

    # Catalog
    op.create_table(
        'master',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('barcode', sa.String(), nullable=True),
        sa.Column('english_name', sa.String(), nullable=True),
        sa.Column('arabic_name', sa.String(), nullable=True),
        sa.Column('brand', sa.String(), nullable=True),
        sa.Column('manufacturer', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_master_id'), 'master', ['id'], unique=False)
    op.create_index(op.f('ix_master_barcode'), 'master', ['barcode'], unique=False)
    op.create_index(op.f('ix_master_english_name'), 'master', ['english_name'], unique=False)
    op.create_index(op.f('ix_master_arabic_name'), 'master', ['arabic_name'], unique=False)

    op.create_table(
        'pending_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('arabic_name', sa.String(), nullable=False),
        sa.Column('english_name', sa.String(), nullable=False),
        sa.Column('barcode', sa.String(), nullable=True),
        sa.Column('brand', sa.String(), nullable=False),
        sa.Column('price', sa.String(), nullable=False),
        sa.Column('final_category', sa.String(), nullable=True),
        sa.Column('added_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pending_items_id'), 'pending_items', ['id'], unique=False)
    op.create_index(op.f('ix_pending_items_added_by'), 'pending_items', ['added_by'], unique=False)

    # Open inventory
    op.create_table(
        'inventory_offers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('drug_id', sa.Integer(), nullable=True),
        sa.Column('english_name', sa.String(), nullable=True),
        sa.Column('arabic_name', sa.String(), nullable=True),
        sa.Column('manufacturer', sa.String(), nullable=True),
        sa.Column('barcode', sa.String(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('quantity > 0'),
        sa.CheckConstraint('price > 0'),
        sa.CheckConstraint('discount >= 0 AND discount <= 100'),
        sa.ForeignKeyConstraint(['pharmacy_id'], ['pharmacies.pharmacy_id']),
        sa.ForeignKeyConstraint(['drug_id'], ['master.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inventory_offers_id'), 'inventory_offers', ['id'], unique=False)
    op.create_index(op.f('ix_inventory_offers_pharmacy_id'), 'inventory_offers', ['pharmacy_id'], unique=False)
    op.create_index(op.f('ix_inventory_offers_barcode'), 'inventory_offers', ['barcode'], unique=False)

    op.create_table(
        'inventory_requests',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('drug_id', sa.Integer(), nullable=True),
        sa.Column('english_name', sa.String(), nullable=True),
        sa.Column('arabic_name', sa.String(), nullable=True),
        sa.Column('barcode', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('quantity > 0'),
        sa.ForeignKeyConstraint(['pharmacy_id'], ['pharmacies.pharmacy_id']),
        sa.ForeignKeyConstraint(['drug_id'], ['master.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_inventory_requests_id'), 'inventory_requests', ['id'], unique=False)
    op.create_index(op.f('ix_inventory_requests_pharmacy_id'), 'inventory_requests', ['pharmacy_id'], unique=False)
    op.create_index(op.f('ix_inventory_requests_barcode'), 'inventory_requests', ['barcode'], unique=False)

    # Archive, ratings, legal text, audit
    op.create_table(
        'sales_archive',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('item_kind', sa.String(length=10), nullable=False),
        sa.Column('arabic_name', sa.String(), nullable=True),
        sa.Column('english_name', sa.String(), nullable=True),
        sa.Column('barcode', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('discount', sa.Float(), nullable=True),
        sa.Column('action_type', sa.String(), nullable=False),
        sa.Column('counterparty_pharmacy_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_sales_archive_id'), 'sales_archive', ['id'], unique=False)
    op.create_index(op.f('ix_sales_archive_pharmacy_id'), 'sales_archive', ['pharmacy_id'], unique=False)
    op.create_index(op.f('ix_sales_archive_action_type'), 'sales_archive', ['action_type'], unique=False)
    op.create_index(op.f('ix_sales_archive_created_at'), 'sales_archive', ['created_at'], unique=False)

    op.create_table(
        'ratings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('from_pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('to_pharmacy_id', sa.Integer(), nullable=False),
        sa.Column('stars', sa.Integer(), nullable=False),
        sa.Column('comment', sa.String(), nullable=True),
        sa.Column('related_item_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('stars >= 1 AND stars <= 5'),
        sa.ForeignKeyConstraint(['from_pharmacy_id'], ['pharmacies.pharmacy_id']),
        sa.ForeignKeyConstraint(['to_pharmacy_id'], ['pharmacies.pharmacy_id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('from_pharmacy_id', 'to_pharmacy_id', 'related_item_id', name='uq_rating_per_item'),
    )
    op.create_index(op.f('ix_ratings_id'), 'ratings', ['id'], unique=False)
    op.create_index(op.f('ix_ratings_from_pharmacy_id'), 'ratings', ['from_pharmacy_id'], unique=False)
    op.create_index(op.f('ix_ratings_to_pharmacy_id'), 'ratings', ['to_pharmacy_id'], unique=False)

    op.create_table(
        'legal_content',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_legal_content_id'), 'legal_content', ['id'], unique=False)
    op.create_index(op.f('ix_legal_content_type'), 'legal_content', ['type'], unique=True)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('actor', sa.String(length=80), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_actor'), 'logs', ['actor'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_table('legal_content')
    op.drop_table('ratings')
    op.drop_table('sales_archive')
    op.drop_table('inventory_requests')
    op.drop_table('inventory_offers')
    op.drop_table('pending_items')
    op.drop_table('master')
    op.drop_table('system_admins')
    op.drop_table('credentials')
    op.drop_table('pharmacies')
