# salon_booking/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Uuid
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class AvailabilityRule(Base):
    """Recurring weekly working window (or break) of a professional"""
    __tablename__ = "availability_rules"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    professional_id = Column(
        Uuid,
        ForeignKey("professionals.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)
    is_break = Column(Boolean, default=False, nullable=False)

    created_at = Column(UTCDateTime, default=utcnow)

    def __repr__(self):
        kind = "break" if self.is_break else "work"
        return f"<AvailabilityRule({kind} day={self.day_of_week} {self.start_time}-{self.end_time})>"


class ScheduleOverride(Base):
    """One-off blocked period (holiday, time off); salon wide when professional_id is null"""
    __tablename__ = "schedule_overrides"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)
    professional_id = Column(
        Uuid,
        ForeignKey("professionals.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(UTCDateTime, default=utcnow)
