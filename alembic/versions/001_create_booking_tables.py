"""create barbershops, barbers, services and appointments

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000
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


appointment_status = postgresql.ENUM('pending', 'confirmed', 'completed', 'cancelled', name='appointment_status', create_type=False)
payment_status = postgresql.ENUM('pending', 'paid', 'refunded', name='payment_status', create_type=False)
payment_method = postgresql.ENUM('cash', 'card', 'transfer', name='payment_method', create_type=False)


def upgrade() -> None:
    # Needed for the uuid/date equality part of the exclusion constraint
    op.execute('CREATE EXTENSION IF NOT EXISTS btree_gist')

    appointment_status.create(op.get_bind(), checkfirst=True)
    payment_status.create(op.get_bind(), checkfirst=True)
    payment_method.create(op.get_bind(), checkfirst=True)

    op.create_table(
        'barbershops',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('opening_hours', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'barbers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('barbershop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('schedule', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('barbershop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('duration_minutes > 0 AND duration_minutes % 15 = 0', name='services_duration_multiple_of_15'),
    )

    op.create_table(
        'appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('barbershop_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('barbershops.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('barber_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('barbers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('appointment_date', sa.Date(), nullable=False, index=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('status', appointment_status, nullable=False, index=True),
        sa.Column('payment_status', payment_status, nullable=False),
        sa.Column('payment_method', payment_method, nullable=True),
        sa.Column('total_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.String(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('start_time < end_time', name='appointments_start_before_end'),
    )
    op.create_index('ix_appointments_barber_date', 'appointments', ['barber_id', 'appointment_date'])

    # Two active appointments of the same barber may never overlap, whatever
    # the application layer does.
    op.execute(
        """
        ALTER TABLE appointments
        ADD CONSTRAINT appointments_no_overlap
        EXCLUDE USING gist (
            barber_id WITH =,
            tsrange(appointment_date + start_time, appointment_date + end_time, '[)') WITH &&
        )
        WHERE (status IN ('pending', 'confirmed'))
        """
    )


def downgrade() -> None:
    op.drop_table('appointments')
    op.drop_table('services')
    op.drop_table('barbers')
    op.drop_table('barbershops')
    op.execute('DROP TYPE payment_method')
    op.execute('DROP TYPE payment_status')
    op.execute('DROP TYPE appointment_status')
