# salon_booking/models/appointment.py
from sqlalchemy import Column, String, Integer, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class AppointmentStatus:
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class SyncStatus:
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"
    DISABLED = "sync_disabled"


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_professional_starts_at", "professional_id", "starts_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # References
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=False, index=True)
    professional_id = Column(Uuid, ForeignKey("professionals.id"), nullable=False)
    service_id = Column(Uuid, ForeignKey("services.id"), nullable=False)

    # Appointment details; ends_at = starts_at + service duration
    starts_at = Column(UTCDateTime, nullable=False)
    ends_at = Column(UTCDateTime, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String(20), default=AppointmentStatus.SCHEDULED, nullable=False)

    # Calendar sync
    google_event_id = Column(String, nullable=True)
    sync_status = Column(String(20), default=SyncStatus.PENDING)
    sync_attempts = Column(Integer, default=0)
    last_sync_error = Column(Text, nullable=True)
    last_synced_at = Column(UTCDateTime, nullable=True)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)
    cancelled_at = Column(UTCDateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    salon = relationship("Salon")
    customer = relationship("Customer")
    professional = relationship("Professional")
    service = relationship("Service")

    def __repr__(self):
        return f"<Appointment(id={self.id}, professional_id={self.professional_id}, starts_at={self.starts_at}, status={self.status})>"

    @property
    def is_scheduled(self) -> bool:
        return self.status == AppointmentStatus.SCHEDULED
