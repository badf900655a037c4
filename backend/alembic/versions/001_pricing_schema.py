"""pricing schema: room types, rooms, bookings, maintenance, demand log

Revision ID: 001_pricing_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_pricing_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'room_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('base_price', sa.Float(), nullable=False),
        sa.Column('current_price', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_number', sa.String(20), nullable=False, unique=True),
        sa.Column('room_type_id', sa.Integer(), sa.ForeignKey('room_types.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Available'),
    )
    op.create_index('idx_rooms_room_type', 'rooms', ['room_type_id'])
    op.create_index('idx_rooms_status', 'rooms', ['status'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('guest_id', sa.String(50), nullable=True),
        sa.Column('check_in', sa.Date(), nullable=False),
        sa.Column('check_out', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Confirmed'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_bookings_room', 'bookings', ['room_id'])
    op.create_index('idx_bookings_dates', 'bookings', ['check_in', 'check_out'])

    op.create_table(
        'room_maintenance',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_id', sa.Integer(), sa.ForeignKey('rooms.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(255), nullable=True),
    )
    op.create_index('idx_room_maintenance_room', 'room_maintenance', ['room_id'])

    op.create_table(
        'demand_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_type_id', sa.Integer(), sa.ForeignKey('room_types.id'), nullable=True),
        sa.Column('search_date', sa.Date(), nullable=False),
        sa.Column('search_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('last_searched_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('room_type_id', 'search_date', name='uq_demand_log_type_date'),
    )
    op.create_index(
        'uq_demand_log_unscoped_date', 'demand_log', ['search_date'],
        unique=True,
        postgresql_where=sa.text('room_type_id IS NULL'),
        sqlite_where=sa.text('room_type_id IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_demand_log_unscoped_date', 'demand_log')
    op.drop_table('demand_log')
    op.drop_index('idx_room_maintenance_room', 'room_maintenance')
    op.drop_table('room_maintenance')
    op.drop_index('idx_bookings_dates', 'bookings')
    op.drop_index('idx_bookings_room', 'bookings')
    op.drop_table('bookings')
    op.drop_index('idx_rooms_status', 'rooms')
    op.drop_index('idx_rooms_room_type', 'rooms')
    op.drop_table('rooms')
    op.drop_table('room_types')
