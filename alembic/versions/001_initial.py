"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20)),
        sa.Column('address_json', postgresql.JSON()),
        sa.Column('role', sa.String(20), nullable=False, default='customer'),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('cuisine', sa.String(100), nullable=False),
        sa.Column('is_open', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create riders table
    op.create_table(
        'riders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), unique=True, nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('vehicle_type', sa.String(20), nullable=False),
        sa.Column('vehicle_number', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, default='offline'),
        sa.Column('longitude', sa.Float(), nullable=False, default=0.0),
        sa.Column('latitude', sa.Float(), nullable=False, default=0.0),
        sa.Column('rating', sa.Float(), default=0.0),
        sa.Column('total_deliveries', sa.Integer(), nullable=False, default=0),
        sa.Column('is_verified', sa.Boolean(), default=False),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create orders table
    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('restaurant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('rider_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('riders.id')),
        sa.Column('items_json', postgresql.JSON(), nullable=False),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, default='pending'),
        sa.Column('delivery_address', postgresql.JSON()),
        sa.Column('payment_method', sa.String(20), nullable=False, default='cash'),
        sa.Column('payment_status', sa.String(20), nullable=False, default='pending'),
        sa.Column('review_rating', sa.Integer()),
        sa.Column('review_comment', sa.Text()),
        sa.Column('review_created_at', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now(), onupdate=sa.func.now()),
    )

    # Create order_status_history table
    op.create_table(
        'order_status_history',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False, default=sa.func.now()),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('note', sa.Text()),
    )

    # Create order_declined_riders table
    op.create_table(
        'order_declined_riders',
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('orders.id'), primary_key=True),
        sa.Column('rider_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('riders.id'), primary_key=True),
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
    )

    # Create indexes
    op.create_index('ix_restaurants_owner_id', 'restaurants', ['owner_id'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('ix_orders_restaurant_id', 'orders', ['restaurant_id'])
    op.create_index('ix_orders_rider_id', 'orders', ['rider_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    op.create_index('ix_order_status_history_order_id', 'order_status_history', ['order_id'])


def downgrade() -> None:
    op.drop_table('order_declined_riders')
    op.drop_table('order_status_history')
    op.drop_table('orders')
    op.drop_table('riders')
    op.drop_table('restaurants')
    op.drop_table('users')
