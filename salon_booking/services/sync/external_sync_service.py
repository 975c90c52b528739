# salon_booking/services/sync/external_sync_service.py
"""Interface of the best-effort push of appointment state to outside systems"""
import logging

logger = logging.getLogger(__name__)


class ExternalSyncService:
    """Implementations raise on failure; callers decide what is fatal"""

    def sync_create(self, appointment_id) -> None:
        raise NotImplementedError

    def sync_update(self, appointment_id) -> None:
        raise NotImplementedError

    def sync_delete(self, appointment_id) -> None:
        raise NotImplementedError


class NullSyncService(ExternalSyncService):
    """Used when SYNC_BACKEND=disabled"""

    def sync_create(self, appointment_id) -> None:
        logger.debug(f"Sync disabled, skipping create of {appointment_id}")

    def sync_update(self, appointment_id) -> None:
        logger.debug(f"Sync disabled, skipping update of {appointment_id}")

    def sync_delete(self, appointment_id) -> None:
        logger.debug(f"Sync disabled, skipping delete of {appointment_id}")
