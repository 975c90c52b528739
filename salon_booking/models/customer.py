# salon_booking/models/customer.py
from sqlalchemy import Column, String, ForeignKey, JSON, UniqueConstraint, Uuid
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("salon_id", "phone", name="uq_customers_salon_phone"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=False)  # digits only
    email = Column(String, nullable=True)

    # Open map, e.g. {"preferred_professional_id": "...", "notes": "..."}
    preferences = Column(JSON, default=dict)

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Customer(id={self.id}, phone={self.phone}, salon_id={self.salon_id})>"
