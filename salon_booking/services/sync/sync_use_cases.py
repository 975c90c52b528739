# salon_booking/services/sync/sync_use_cases.py
"""Fire-and-log wrappers around ExternalSyncService; they never raise"""
import logging

from salon_booking.services.sync.external_sync_service import ExternalSyncService

logger = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_DELETE = "delete"


class SyncAppointmentUseCase:
    action = ""

    def __init__(self, sync_service: ExternalSyncService):
        self.sync_service = sync_service

    def _call(self, appointment_id) -> None:
        raise NotImplementedError

    def execute(self, appointment_id) -> bool:
        """Run the sync once; returns False when it failed"""
        try:
            self._call(appointment_id)
            logger.info(f"Appointment {appointment_id} sync {self.action} done")
            return True
        except Exception as e:
            logger.error(f"Appointment {appointment_id} sync {self.action} failed: {e}")
            return False


class SyncAppointmentCreation(SyncAppointmentUseCase):
    action = ACTION_CREATE

    def _call(self, appointment_id) -> None:
        self.sync_service.sync_create(appointment_id)


class SyncAppointmentUpdate(SyncAppointmentUseCase):
    action = ACTION_UPDATE

    def _call(self, appointment_id) -> None:
        self.sync_service.sync_update(appointment_id)


class SyncAppointmentDeletion(SyncAppointmentUseCase):
    action = ACTION_DELETE

    def _call(self, appointment_id) -> None:
        self.sync_service.sync_delete(appointment_id)


USE_CASES = {
    ACTION_CREATE: SyncAppointmentCreation,
    ACTION_UPDATE: SyncAppointmentUpdate,
    ACTION_DELETE: SyncAppointmentDeletion,
}


def build_use_case(action: str, sync_service: ExternalSyncService) -> SyncAppointmentUseCase:
    try:
        return USE_CASES[action](sync_service)
    except KeyError:
        raise ValueError(f"Unknown sync action: {action}")
