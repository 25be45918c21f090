"""Create rooms, schedules, reservations and tags

Revision ID: 3b7e1c2a9f40
Revises:
Create Date: 2026-03-01 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3b7e1c2a9f40'
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_PREDICATE = sa.text("status IN ('waiting', 'accepted')")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('room_type', sa.Enum('class', 'laboratory', 'theater',
            name='room_type', native_enum=False), nullable=False),
        sa.Column('status', sa.Enum('open', 'reserved', 'closed',
            name='room_status', native_enum=False), nullable=False),
        sa.Column('tag_ids', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rooms_status', 'rooms', ['status'])

    op.create_table(
        'room_images',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_room_images_room_id', 'room_images', ['room_id'])

    op.create_table(
        'schedules',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('start_time < end_time', name='schedules_time_range_check'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_schedules_room_id', 'schedules', ['room_id'])

    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('sched_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('waiting', 'accepted', 'denied', 'cancelled',
            name='reservation_status', native_enum=False), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['sched_id'], ['schedules.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reservations_user_id', 'reservations', ['user_id'])
    op.create_index('ix_reservations_sched_date', 'reservations', ['sched_id', 'date'])
    # Only waiting/accepted rows hold a slot-instance
    op.create_index(
        'uq_reservations_active_slot', 'reservations', ['sched_id', 'date'],
        unique=True,
        sqlite_where=ACTIVE_PREDICATE,
        postgresql_where=ACTIVE_PREDICATE,
    )


def downgrade() -> None:
    op.drop_index('uq_reservations_active_slot', table_name='reservations')
    op.drop_index('ix_reservations_sched_date', table_name='reservations')
    op.drop_index('ix_reservations_user_id', table_name='reservations')
    op.drop_table('reservations')
    op.drop_index('ix_schedules_room_id', table_name='schedules')
    op.drop_table('schedules')
    op.drop_index('ix_room_images_room_id', table_name='room_images')
    op.drop_table('room_images')
    op.drop_index('ix_rooms_status', table_name='rooms')
    op.drop_table('rooms')
    op.drop_table('tags')
