# salon_booking/services/sync/google_calendar_sync.py
"""
Google Calendar implementation of ExternalSyncService.

Every call opens its own session, so it can run on a worker thread or in a
Celery worker after the booking transaction has committed. Outcome is
recorded on the appointment (sync_status, sync_attempts, last_sync_error,
last_synced_at) and failures are re-raised as SyncError.
"""
from datetime import datetime, timezone
from typing import Callable, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from salon_booking.core.errors import SyncError
from salon_booking.models.appointment import Appointment, SyncStatus
from salon_booking.models.calendar_integration import CalendarIntegration
from salon_booking.services.calendar.google_calendar_service import GoogleCalendarService
from salon_booking.services.sync.external_sync_service import ExternalSyncService

logger = logging.getLogger(__name__)


class GoogleCalendarSyncService(ExternalSyncService):

    def __init__(
            self,
            session_factory: Callable[[], Session],
            calendar_service_factory: Callable[[], GoogleCalendarService] = GoogleCalendarService
    ):
        self.session_factory = session_factory
        self.calendar_service_factory = calendar_service_factory

    def sync_create(self, appointment_id) -> None:
        self._run("create", appointment_id)

    def sync_update(self, appointment_id) -> None:
        self._run("update", appointment_id)

    def sync_delete(self, appointment_id) -> None:
        self._run("delete", appointment_id)

    def _run(self, action: str, appointment_id) -> None:
        appointment_id = appointment_id if isinstance(appointment_id, UUID) else UUID(str(appointment_id))
        db = self.session_factory()
        try:
            appointment = db.get(Appointment, appointment_id)
            if not appointment:
                logger.warning(f"Appointment {appointment_id} not found for sync {action}")
                return

            integration = self._get_integration(db, appointment.salon_id)
            calendar_id = appointment.professional.google_calendar_id if appointment.professional else None

            if not integration or not calendar_id:
                appointment.sync_status = SyncStatus.DISABLED
                db.commit()
                logger.info(f"Sync disabled for appointment {appointment_id}: no integration or calendar")
                return

            try:
                self._push(action, db, appointment, integration, calendar_id)
            except Exception as exc:
                db.rollback()
                appointment = db.get(Appointment, appointment_id)
                if appointment:
                    appointment.sync_status = SyncStatus.FAILED
                    appointment.sync_attempts = (appointment.sync_attempts or 0) + 1
                    appointment.last_sync_error = str(exc)
                    db.commit()
                raise SyncError(f"Google Calendar {action} failed for appointment {appointment_id}: {exc}") from exc

            appointment.sync_status = SyncStatus.SYNCED
            appointment.sync_attempts = (appointment.sync_attempts or 0) + 1
            appointment.last_sync_error = None
            appointment.last_synced_at = datetime.now(timezone.utc)
            integration.last_sync_at = appointment.last_synced_at
            integration.last_sync_status = "success"
            db.commit()
        finally:
            db.close()

    def _push(
            self,
            action: str,
            db: Session,
            appointment: Appointment,
            integration: CalendarIntegration,
            calendar_id: str
    ) -> None:
        calendar = self.calendar_service_factory()

        if action == "delete":
            if appointment.google_event_id:
                calendar.delete_event(integration, db, calendar_id, appointment.google_event_id)
            return

        body = self._event_body(appointment)
        if action == "update" and appointment.google_event_id:
            calendar.update_event(integration, db, calendar_id, appointment.google_event_id, body)
        else:
            appointment.google_event_id = calendar.create_event(integration, db, calendar_id, body)

    @staticmethod
    def _get_integration(db: Session, salon_id) -> Optional[CalendarIntegration]:
        return db.query(CalendarIntegration).filter_by(
            salon_id=salon_id,
            provider="google",
            is_active=True
        ).first()

    @staticmethod
    def _event_body(appointment: Appointment) -> Dict:
        service_name = appointment.service.name if appointment.service else "Appointment"
        customer_name = appointment.customer.name if appointment.customer else ""
        timezone_name = appointment.salon.timezone if appointment.salon else "UTC"

        return {
            'summary': f"{service_name} - {customer_name}".strip(" -"),
            'description': appointment.notes or "",
            'start': {'dateTime': appointment.starts_at.isoformat(), 'timeZone': timezone_name},
            'end': {'dateTime': appointment.ends_at.isoformat(), 'timeZone': timezone_name},
            'extendedProperties': {'private': {'appointment_id': str(appointment.id)}},
        }
