"""Barber model.

``schedule`` holds the weekly recurring shifts:
{"monday": [{"start": "09:00", "end": "13:00"}, {"start": "15:00", "end": "19:00"}], "sunday": null}
"""

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.types import JSON
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
from trimly.core.database import Base


class Barber(Base):
    __tablename__ = "barbers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    barbershop_id = Column(UUID(as_uuid=True), ForeignKey("barbershops.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    schedule = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    barbershop = relationship("Barbershop", back_populates="barbers")
    appointments = relationship("Appointment", back_populates="barber")
