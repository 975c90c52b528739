# salon_booking/models/calendar_integration.py
from sqlalchemy import Column, String, Boolean, LargeBinary, ForeignKey, JSON, Uuid
import uuid

from salon_booking.models.base import Base, UTCDateTime, utcnow


class CalendarIntegration(Base):
    __tablename__ = "calendar_integrations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    salon_id = Column(Uuid, ForeignKey("salons.id"), nullable=False, index=True)

    provider = Column(String, default="google")
    is_active = Column(Boolean, default=True)

    # OAuth tokens, Fernet encrypted
    access_token_encrypted = Column(LargeBinary)
    refresh_token_encrypted = Column(LargeBinary)
    token_expires_at = Column(UTCDateTime)

    provider_config = Column(JSON, default=dict)

    last_sync_at = Column(UTCDateTime)
    last_sync_status = Column(String)  # 'success', 'failed'

    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow)
