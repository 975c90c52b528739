# salon_booking/tasks/calendar_tasks.py
from salon_booking.config.celery_config import celery_app
from salon_booking.config.database import SessionLocal
from salon_booking.services.sync.google_calendar_sync import GoogleCalendarSyncService
from salon_booking.services.sync.sync_use_cases import build_use_case
import logging

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=0)
def sync_appointment_task(self, action: str, appointment_id: str):
    """Push one appointment change to the external calendar (single attempt)"""
    use_case = build_use_case(action, GoogleCalendarSyncService(SessionLocal))
    synced = use_case.execute(appointment_id)

    if synced:
        return {"status": "synced", "action": action, "appointment_id": appointment_id}

    logger.warning(f"Task {self.request.id}: sync {action} of {appointment_id} failed, not retrying")
    return {"status": "failed", "action": action, "appointment_id": appointment_id}
