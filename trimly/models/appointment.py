"""Appointment model for booking system."""

from sqlalchemy import Column, String, DateTime, Date, Time, ForeignKey, Numeric, Enum as SQLEnum, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from trimly.core.database import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"


# Statuses whose interval still blocks the barber's calendar
ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Appointment(Base):
    __tablename__ = "appointments"
    # The overlap exclusion constraint (btree_gist) lives in the migration only,
    # SQLite test databases can't express it.
    __table_args__ = (
        Index("ix_appointments_barber_date", "barber_id", "appointment_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(UUID(as_uuid=True), ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True)
    barber_id = Column(UUID(as_uuid=True), ForeignKey("barbers.id", ondelete="CASCADE"), nullable=False)
    client_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=False)

    appointment_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status", values_callable=_enum_values),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Payment (price is a snapshot of the service price at booking time)
    payment_status = Column(
        SQLEnum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    payment_method = Column(
        SQLEnum(PaymentMethod, name="payment_method", values_callable=_enum_values),
        nullable=True,
    )
    total_price = Column(Numeric(10, 2), nullable=False)

    notes = Column(Text, nullable=True)
    cancellation_reason = Column(String, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    barbershop = relationship("Barbershop", back_populates="appointments")
    barber = relationship("Barber", back_populates="appointments")
    service = relationship("Service")
