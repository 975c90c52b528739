# salon_booking/models/salon.py
"""
Salon Model - tenant root
Business hours and settings stay as JSON maps; see the known keys below.
"""
from sqlalchemy import Column, String, Boolean, JSON, Text, Uuid
from sqlalchemy.orm import relationship
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class Salon(Base):
    __tablename__ = "salons"

    # Known keys of the free-form settings map
    SETTING_SLOT_GRANULARITY = "slot_granularity_minutes"
    SETTING_HIDE_PAST_SLOTS = "hide_past_slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    timezone = Column(String(50), nullable=False, default="America/Sao_Paulo")

    # {"0": {"start": "09:00", "end": "18:00"}, ...}; missing day = closed
    business_hours = Column(JSON, default=dict)

    address = Column(String(300), nullable=True)
    phone = Column(String(20), nullable=True)
    settings = Column(JSON, default=dict)
    cancellation_policy = Column(Text, nullable=True)

    is_archived = Column(Boolean, default=False, nullable=False)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    professionals = relationship("Professional", back_populates="salon")
    services = relationship("Service", back_populates="salon")

    def __repr__(self):
        return f"<Salon(id={self.id}, name={self.name})>"

    def get_setting(self, key: str, default=None):
        """Read a key from the open settings map, tolerating unknown shapes"""
        settings = self.settings if isinstance(self.settings, dict) else {}
        return settings.get(key, default)

    def get_business_hours_for_day(self, day_of_week: int):
        """Return {"start", "end"} for the day or None when closed"""
        hours = (self.business_hours or {}).get(str(day_of_week))
        if not hours or not hours.get("start") or not hours.get("end"):
            return None
        if hours["start"] >= hours["end"]:
            return None
        return hours
