"""create_order_and_directory_tables

Revision ID: 4b1e6c2d8a7f
Revises:
Create Date: 2026-10-19 09:30:12.418207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '4b1e6c2d8a7f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'countries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('two_letter_iso_code', sa.String(length=2), nullable=True, comment='ISO-3166 alpha-2'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_countries_id', 'countries', ['id'], unique=False)
    op.create_index('ix_countries_two_letter_iso_code', 'countries', ['two_letter_iso_code'], unique=False)

    op.create_table(
        'state_provinces',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('country_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('abbreviation', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['country_id'], ['countries.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_state_provinces_id', 'state_provinces', ['id'], unique=False)
    op.create_index('ix_state_provinces_country_id', 'state_provinces', ['country_id'], unique=False)

    op.create_table(
        'addresses',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('address1', sa.String(length=255), nullable=True),
        sa.Column('address2', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('zip_postal_code', sa.String(length=20), nullable=True),
        sa.Column('state_province_id', sa.Integer(), nullable=True),
        sa.Column('country_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['state_province_id'], ['state_provinces.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['country_id'], ['countries.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_addresses_id', 'addresses', ['id'], unique=False)

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_total', sa.Numeric(precision=18, scale=4), nullable=False, comment='Order total'),
        sa.Column('billing_address_id', sa.Integer(), nullable=True, comment='Billing address'),
        sa.Column('order_status', sa.String(length=50), nullable=False, server_default='pending',
                  comment='Order status: pending/processing/complete/cancelled'),
        sa.Column('payment_status', sa.String(length=50), nullable=False, server_default='pending',
                  comment='Payment status: pending/authorized/paid/partially_refunded/refunded/voided'),
        sa.Column('authorization_transaction_id', sa.String(length=200), nullable=True, comment='Gateway transaction id'),
        sa.Column('created_on_utc', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='Placed at'),
        sa.Column('paid_date_utc', sa.DateTime(timezone=True), nullable=True, comment='Paid at'),
        sa.Column('deleted', sa.Boolean(), nullable=False, server_default='false'),
        sa.ForeignKeyConstraint(['billing_address_id'], ['addresses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_id', 'orders', ['id'], unique=False)
    op.create_index('ix_orders_order_status', 'orders', ['order_status'], unique=False)
    op.create_index('ix_orders_payment_status', 'orders', ['payment_status'], unique=False)
    op.create_index('idx_order_status_payment', 'orders', ['order_status', 'payment_status'], unique=False)

    op.create_table(
        'order_notes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False, comment='Order'),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('display_to_customer', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_on_utc', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_order_notes_id', 'order_notes', ['id'], unique=False)
    op.create_index('ix_order_notes_order_id', 'order_notes', ['order_id'], unique=False)
    op.create_index('ix_order_notes_created_on_utc', 'order_notes', ['created_on_utc'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_order_notes_created_on_utc', table_name='order_notes')
    op.drop_index('ix_order_notes_order_id', table_name='order_notes')
    op.drop_index('ix_order_notes_id', table_name='order_notes')
    op.drop_table('order_notes')

    op.drop_index('idx_order_status_payment', table_name='orders')
    op.drop_index('ix_orders_payment_status', table_name='orders')
    op.drop_index('ix_orders_order_status', table_name='orders')
    op.drop_index('ix_orders_id', table_name='orders')
    op.drop_table('orders')

    op.drop_index('ix_addresses_id', table_name='addresses')
    op.drop_table('addresses')

    op.drop_index('ix_state_provinces_country_id', table_name='state_provinces')
    op.drop_index('ix_state_provinces_id', table_name='state_provinces')
    op.drop_table('state_provinces')

    op.drop_index('ix_countries_two_letter_iso_code', table_name='countries')
    op.drop_index('ix_countries_id', table_name='countries')
    op.drop_table('countries')
