# salon_booking/services/appointment/conflict_detector.py
"""Overlap checks between a candidate interval and a professional's bookings"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
import logging

from salon_booking.core.errors import AppointmentConflictError
from salon_booking.models.appointment import Appointment
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.utils.time_utils import to_utc

logger = logging.getLogger(__name__)


class ConflictDetector:

    def __init__(self, appointments: AppointmentRepository):
        self.appointments = appointments

    def find_conflicts(
            self,
            professional_id: UUID,
            starts_at: datetime,
            ends_at: datetime,
            exclude_appointment_id: Optional[UUID] = None
    ) -> List[Appointment]:
        """Non-cancelled appointments of the professional overlapping [starts_at, ends_at)"""
        return self.appointments.find_conflicting(
            professional_id,
            to_utc(starts_at),
            to_utc(ends_at),
            exclude_id=exclude_appointment_id,
        )

    def ensure_free(
            self,
            professional_id: UUID,
            starts_at: datetime,
            ends_at: datetime,
            exclude_appointment_id: Optional[UUID] = None
    ) -> None:
        """Raise AppointmentConflictError when the interval is taken"""
        conflicts = self.find_conflicts(professional_id, starts_at, ends_at, exclude_appointment_id)
        if conflicts:
            logger.info(
                f"Conflict for professional {professional_id} at {starts_at.isoformat()}: "
                f"{[str(a.id) for a in conflicts]}"
            )
            raise AppointmentConflictError(conflicting_ids=[a.id for a in conflicts])
