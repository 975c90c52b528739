# salon_booking/schemas/appointment.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class AppointmentCreateRequest(BaseModel):
    """Booking request; the end is derived from the service duration"""
    customer_id: UUID
    professional_id: UUID
    service_id: UUID
    starts_at: datetime = Field(..., description="Start instant; naive values are read in the salon's zone")
    notes: Optional[str] = Field(None, max_length=2000)


class AppointmentUpdateRequest(BaseModel):
    professional_id: Optional[UUID] = None
    service_id: Optional[UUID] = None
    starts_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=2000)


class AppointmentCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentDTO(BaseModel):
    id: UUID
    salon_id: UUID
    customer_id: UUID
    customer_name: Optional[str] = None
    professional_id: UUID
    professional_name: Optional[str] = None
    service_id: UUID
    service_name: Optional[str] = None
    starts_at: datetime
    ends_at: datetime
    local_start: str = Field(..., description="dd/mm/YYYY HH:MM in the salon's zone")
    local_end: str
    status: str
    notes: Optional[str] = None
    sync_status: Optional[str] = None
    google_event_id: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None


class UpcomingAppointmentsDTO(BaseModel):
    customer_id: UUID
    total: int
    appointments: List[AppointmentDTO] = Field(default_factory=list)
