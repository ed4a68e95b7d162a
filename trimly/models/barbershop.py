"""Barbershop model.

Opening hours are stored as JSON in the layout the mobile app sends:
{"monday": {"open": "09:00", "close": "18:00"}, "sunday": null, ...}
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from trimly.core.database import Base


class Barbershop(Base):
    __tablename__ = "barbershops"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    opening_hours = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    barbers = relationship("Barber", back_populates="barbershop")
    services = relationship("Service", back_populates="barbershop")
    appointments = relationship("Appointment", back_populates="barbershop")
