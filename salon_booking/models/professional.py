# salon_booking/models/professional.py
from sqlalchemy import Column, String, Boolean, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


professional_services = Table(
    "professional_services",
    Base.metadata,
    Column("professional_id", Uuid, ForeignKey("professionals.id", ondelete="CASCADE"), primary_key=True),
    Column("service_id", Uuid, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True),
)


class ProfessionalRole:
    MANAGER = "MANAGER"
    STAFF = "STAFF"


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    role = Column(String(20), default=ProfessionalRole.STAFF, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    google_calendar_id = Column(String, nullable=True)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    salon = relationship("Salon", back_populates="professionals")
    services = relationship("Service", secondary=professional_services, lazy="selectin")

    def __repr__(self):
        return f"<Professional(id={self.id}, name={self.name}, salon_id={self.salon_id})>"

    @property
    def service_ids(self) -> set:
        return {service.id for service in self.services}

    def can_perform_service(self, service_id) -> bool:
        return service_id in self.service_ids
