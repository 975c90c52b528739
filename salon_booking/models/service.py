# salon_booking/models/service.py
"""
Service Model - bookable services of a salon
Duration sizes every appointment booked for the service.
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Boolean, Text, Uuid
from sqlalchemy.orm import relationship
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class Service(Base):
    __tablename__ = "services"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(
        Uuid,
        ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=True)

    # Duration in minutes, must be > 0 to be bookable
    duration_minutes = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, index=True)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    salon = relationship("Salon", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, salon_id={self.salon_id})>"

    def is_bookable(self) -> bool:
        return bool(self.is_active) and (self.duration_minutes or 0) > 0

    @property
    def formatted_duration(self) -> str:
        """Return human-readable duration string"""
        if not self.duration_minutes:
            return "Duration varies"

        hours = self.duration_minutes // 60
        minutes = self.duration_minutes % 60

        if hours > 0 and minutes > 0:
            return f"{hours}h {minutes}m"
        elif hours > 0:
            return f"{hours}h"
        else:
            return f"{minutes}m"
