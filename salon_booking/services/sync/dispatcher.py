# salon_booking/services/sync/dispatcher.py
"""
Sync dispatchers.

dispatch() schedules a sync without blocking the caller; run_now() runs it
in the caller's thread and waits (used before hard deletes). Each sync is
attempted once.
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional
import logging

from salon_booking.config.settings import get_settings
from salon_booking.services.sync.external_sync_service import ExternalSyncService, NullSyncService
from salon_booking.services.sync.sync_use_cases import build_use_case

logger = logging.getLogger(__name__)


class SyncDispatcher:

    def __init__(self, sync_service: ExternalSyncService):
        self.sync_service = sync_service

    def dispatch(self, action: str, appointment_id) -> None:
        raise NotImplementedError

    def run_now(self, action: str, appointment_id) -> bool:
        return build_use_case(action, self.sync_service).execute(appointment_id)


class InlineSyncDispatcher(SyncDispatcher):
    """Runs every sync synchronously"""

    def dispatch(self, action: str, appointment_id) -> None:
        self.run_now(action, appointment_id)


class ThreadSyncDispatcher(SyncDispatcher):
    """Runs syncs on a bounded thread pool"""

    def __init__(self, sync_service: ExternalSyncService, max_workers: int = 4):
        super().__init__(sync_service)
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="appointment-sync")

    def dispatch(self, action: str, appointment_id) -> Future:
        return self.executor.submit(self.run_now, action, appointment_id)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


class CelerySyncDispatcher(SyncDispatcher):
    """Enqueues syncs on the Celery worker"""

    def dispatch(self, action: str, appointment_id) -> None:
        from salon_booking.tasks.calendar_tasks import sync_appointment_task

        try:
            sync_appointment_task.delay(action, str(appointment_id))
        except Exception as e:
            # Booking is already committed
            logger.error(f"Could not enqueue sync {action} for appointment {appointment_id}: {e}")


_default_dispatcher: Optional[SyncDispatcher] = None


def build_sync_service(backend: str) -> ExternalSyncService:
    if backend == "disabled":
        return NullSyncService()

    from salon_booking.config.database import SessionLocal
    from salon_booking.services.sync.google_calendar_sync import GoogleCalendarSyncService

    return GoogleCalendarSyncService(SessionLocal)


def get_sync_dispatcher() -> SyncDispatcher:
    """Process-wide dispatcher selected by SYNC_BACKEND"""
    global _default_dispatcher
    if _default_dispatcher is None:
        settings = get_settings()
        backend = settings.SYNC_BACKEND
        sync_service = build_sync_service(backend)

        if backend == "celery":
            _default_dispatcher = CelerySyncDispatcher(sync_service)
        elif backend == "inline" or backend == "disabled":
            _default_dispatcher = InlineSyncDispatcher(sync_service)
        else:
            _default_dispatcher = ThreadSyncDispatcher(sync_service, max_workers=settings.SYNC_MAX_WORKERS)

        logger.info(f"Sync dispatcher: {type(_default_dispatcher).__name__} ({backend})")
    return _default_dispatcher
