# salon_booking/services/appointment/appointment_mapper.py
"""Model to DTO mapping; datetimes are presented in the salon's zone"""
from typing import Optional
from zoneinfo import ZoneInfo

from salon_booking.config.settings import get_settings
from salon_booking.models.appointment import Appointment
from salon_booking.schemas.appointment import AppointmentDTO
from salon_booking.utils.time_utils import format_local_datetime, get_zone


def salon_zone(appointment: Appointment) -> ZoneInfo:
    salon = appointment.salon
    return get_zone(salon.timezone if salon and salon.timezone else get_settings().DEFAULT_TIMEZONE)


def to_appointment_dto(appointment: Appointment, tz: Optional[ZoneInfo] = None) -> AppointmentDTO:
    tz = tz or salon_zone(appointment)

    return AppointmentDTO(
        id=appointment.id,
        salon_id=appointment.salon_id,
        customer_id=appointment.customer_id,
        customer_name=appointment.customer.name if appointment.customer else None,
        professional_id=appointment.professional_id,
        professional_name=appointment.professional.name if appointment.professional else None,
        service_id=appointment.service_id,
        service_name=appointment.service.name if appointment.service else None,
        starts_at=appointment.starts_at.astimezone(tz),
        ends_at=appointment.ends_at.astimezone(tz),
        local_start=format_local_datetime(appointment.starts_at, tz),
        local_end=format_local_datetime(appointment.ends_at, tz),
        status=appointment.status,
        notes=appointment.notes,
        sync_status=appointment.sync_status,
        google_event_id=appointment.google_event_id,
        cancelled_at=appointment.cancelled_at,
        cancellation_reason=appointment.cancellation_reason,
    )
