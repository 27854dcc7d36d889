"""create profiles, shift_templates and shift_bookings

Revision ID: create_shift_booking
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_shift_booking'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'profiles',
        sa.Column('profile_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('profile_id'),
        sa.UniqueConstraint('email')
    )
    op.create_index(op.f('ix_profiles_email'), 'profiles', ['email'], unique=True)

    op.create_table(
        'shift_templates',
        sa.Column('shift_template_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False),
        sa.Column('shift_type', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint(
            "shift_type IN ('morning', 'afternoon', 'evening', 'night', 'custom')",
            name='ck_shift_templates_type',
        ),
        sa.PrimaryKeyConstraint('shift_template_id')
    )

    op.create_table(
        'shift_bookings',
        sa.Column('booking_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('shift_template_id', sa.Uuid(), nullable=False),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='booked'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "status IN ('booked', 'confirmed', 'cancelled', 'completed')",
            name='ck_shift_bookings_status',
        ),
        sa.ForeignKeyConstraint(['shift_template_id'], ['shift_templates.shift_template_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('booking_id')
    )
    op.create_index(op.f('ix_shift_bookings_user_id'), 'shift_bookings', ['user_id'], unique=False)
    # One worker per slot
    op.create_index(
        'uq_shift_bookings_active_slot',
        'shift_bookings',
        ['shift_template_id', 'shift_date'],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
        sqlite_where=sa.text("status <> 'cancelled'"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('uq_shift_bookings_active_slot', table_name='shift_bookings')
    op.drop_index(op.f('ix_shift_bookings_user_id'), table_name='shift_bookings')
    op.drop_table('shift_bookings')
    op.drop_table('shift_templates')
    op.drop_index(op.f('ix_profiles_email'), table_name='profiles')
    op.drop_table('profiles')
