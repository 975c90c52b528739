# ============================================================================
# salon_booking/services/appointment/appointment_service.py
# ============================================================================
"""
Appointment lifecycle: create, reschedule, cancel, complete, delete.

Public methods return OperationResult; expected failures (validation, not
found, conflict) never escape as exceptions. Infrastructure failures such
as database errors or BookingLockTimeout propagate after a rollback.

Overlap check and write run while holding the professional's booking lock.
External sync is dispatched after the lock is released.
"""
from datetime import datetime
from typing import Callable, Optional, Tuple
from uuid import UUID
from zoneinfo import ZoneInfo
import logging

from salon_booking.config.settings import get_settings
from salon_booking.core.errors import (
    AppointmentNotFoundError,
    AppointmentNotModifiableError,
    CustomerNotFoundError,
    DomainError,
    ProfessionalCannotPerformServiceError,
    ProfessionalInactiveError,
    ProfessionalNotFoundError,
    SalonNotFoundError,
    ServiceNotBookableError,
    ServiceNotFoundError,
    SlotUnavailableError,
    ValidationError,
)
from salon_booking.core.result import OperationResult
from salon_booking.models.appointment import Appointment, AppointmentStatus, SyncStatus
from salon_booking.models.base import utcnow
from salon_booking.models.professional import Professional
from salon_booking.models.salon import Salon
from salon_booking.models.service import Service
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.repositories.catalog_repository import CatalogRepository
from salon_booking.schemas.appointment import AppointmentDTO, UpcomingAppointmentsDTO
from salon_booking.services.appointment.appointment_mapper import to_appointment_dto
from salon_booking.services.appointment.booking_lock import BookingLockProvider
from salon_booking.services.appointment.conflict_detector import ConflictDetector
from salon_booking.services.availability.availability_service import AvailabilityService
from salon_booking.services.sync.dispatcher import SyncDispatcher
from salon_booking.services.sync.sync_use_cases import ACTION_CREATE, ACTION_DELETE, ACTION_UPDATE
from salon_booking.utils.phone import validate_phone
from salon_booking.utils.time_utils import add_minutes, ensure_aware, get_zone, to_utc

logger = logging.getLogger(__name__)


class AppointmentLifecycleService:
    """Handles appointment operations"""

    def __init__(
            self,
            catalog: CatalogRepository,
            appointments: AppointmentRepository,
            availability: AvailabilityService,
            conflicts: ConflictDetector,
            locks: BookingLockProvider,
            sync: SyncDispatcher,
            clock: Callable[[], datetime] = utcnow
    ):
        self.catalog = catalog
        self.appointments = appointments
        self.availability = availability
        self.conflicts = conflicts
        self.locks = locks
        self.sync = sync
        self.clock = clock

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(
            self,
            salon_id: UUID,
            customer_id: UUID,
            professional_id: UUID,
            service_id: UUID,
            starts_at: datetime,
            notes: Optional[str] = None
    ) -> OperationResult[AppointmentDTO]:
        """Book a service with a professional; ends_at comes from the service duration"""
        try:
            salon, tz = self._get_salon(salon_id)
            customer = self.catalog.get_customer(customer_id, salon.id)
            if not customer:
                raise CustomerNotFoundError(customer_id)
            professional, service = self._resolve_booking(salon.id, professional_id, service_id)

            start = to_utc(ensure_aware(starts_at, tz))
            end = add_minutes(start, service.duration_minutes)

            with self.locks.lock(professional.id):
                self.appointments.lock_professional_row(professional.id)
                self._ensure_bookable(professional, start, end)

                appointment = self.appointments.add(Appointment(
                    salon_id=salon.id,
                    customer_id=customer.id,
                    professional_id=professional.id,
                    service_id=service.id,
                    starts_at=start,
                    ends_at=end,
                    notes=notes,
                    status=AppointmentStatus.SCHEDULED,
                    sync_status=SyncStatus.PENDING,
                    sync_attempts=0,
                ))
                self.appointments.commit()

        except DomainError as e:
            return self._fail("create", e)
        except Exception:
            self.appointments.rollback()
            raise

        logger.info(
            f"Appointment {appointment.id} booked: professional={professional.id} "
            f"service={service.id} starts_at={start.isoformat()}"
        )
        self.sync.dispatch(ACTION_CREATE, appointment.id)
        return OperationResult.ok(to_appointment_dto(self.appointments.refresh(appointment), tz))

    def update(
            self,
            salon_id: UUID,
            appointment_id: UUID,
            professional_id: Optional[UUID] = None,
            service_id: Optional[UUID] = None,
            starts_at: Optional[datetime] = None,
            notes: Optional[str] = None
    ) -> OperationResult[AppointmentDTO]:
        """Reschedule or edit a scheduled appointment"""
        try:
            salon, tz = self._get_salon(salon_id)
            appointment = self._get_appointment(salon.id, appointment_id)
            self._ensure_scheduled(appointment)

            professional_changed = professional_id is not None and professional_id != appointment.professional_id
            service_changed = service_id is not None and service_id != appointment.service_id

            # Unchanged professional and service are not revalidated
            if professional_changed or service_changed:
                professional, service = self._resolve_booking(
                    salon.id,
                    professional_id or appointment.professional_id,
                    service_id or appointment.service_id,
                )
            else:
                professional, service = appointment.professional, appointment.service

            start = to_utc(ensure_aware(starts_at, tz)) if starts_at is not None else appointment.starts_at
            start_changed = start != appointment.starts_at
            end = add_minutes(start, service.duration_minutes) if (service_changed or start_changed) else appointment.ends_at

            timing_changed = start_changed or service_changed or professional_changed

            if timing_changed:
                with self.locks.lock(professional.id):
                    self.appointments.lock_professional_row(professional.id)
                    self._ensure_bookable(professional, start, end, exclude_id=appointment.id)
                    self._apply_changes(appointment, professional, service, start, end, notes)
                    self.appointments.commit()
            else:
                self._apply_changes(appointment, professional, service, start, end, notes)
                self.appointments.commit()

        except DomainError as e:
            return self._fail("update", e)
        except Exception:
            self.appointments.rollback()
            raise

        logger.info(f"Appointment {appointment.id} updated (rescheduled={timing_changed})")
        self.sync.dispatch(ACTION_UPDATE, appointment.id)
        return OperationResult.ok(to_appointment_dto(self.appointments.refresh(appointment), tz))

    def cancel(self, salon_id: UUID, appointment_id: UUID, reason: Optional[str] = None) -> OperationResult[AppointmentDTO]:
        """Soft cancel; the calendar event is removed afterwards in the background"""
        try:
            salon, tz = self._get_salon(salon_id)
            appointment = self._get_appointment(salon.id, appointment_id)
            self._ensure_scheduled(appointment)

            appointment.status = AppointmentStatus.CANCELLED
            appointment.cancelled_at = self.clock()
            appointment.cancellation_reason = reason
            self.appointments.commit()

        except DomainError as e:
            return self._fail("cancel", e)
        except Exception:
            self.appointments.rollback()
            raise

        logger.info(f"Appointment {appointment.id} cancelled: {reason or 'no reason given'}")
        self.sync.dispatch(ACTION_DELETE, appointment.id)
        return OperationResult.ok(to_appointment_dto(self.appointments.refresh(appointment), tz))

    def complete(self, salon_id: UUID, appointment_id: UUID) -> OperationResult[AppointmentDTO]:
        try:
            salon, tz = self._get_salon(salon_id)
            appointment = self._get_appointment(salon.id, appointment_id)
            self._ensure_scheduled(appointment)

            appointment.status = AppointmentStatus.COMPLETED
            self.appointments.commit()

        except DomainError as e:
            return self._fail("complete", e)
        except Exception:
            self.appointments.rollback()
            raise

        logger.info(f"Appointment {appointment.id} completed")
        return OperationResult.ok(to_appointment_dto(self.appointments.refresh(appointment), tz))

    def delete(self, salon_id: UUID, appointment_id: UUID) -> OperationResult[dict]:
        """
        Hard delete in two phases: the external delete runs and is awaited
        first, then the row is removed. A failed sync is logged and the
        delete still goes through.
        """
        try:
            salon, _ = self._get_salon(salon_id)
            appointment = self._get_appointment(salon.id, appointment_id)
            appointment_id = appointment.id

            synced = self.sync.run_now(ACTION_DELETE, appointment_id)
            if not synced:
                logger.warning(f"Deleting appointment {appointment_id} without calendar cleanup")

            # The sync ran on its own session
            self.appointments.refresh(appointment)
            self.appointments.delete(appointment)
            self.appointments.commit()

        except DomainError as e:
            return self._fail("delete", e)
        except Exception:
            self.appointments.rollback()
            raise

        logger.info(f"Appointment {appointment_id} deleted")
        return OperationResult.ok({"id": str(appointment_id), "deleted": True, "calendar_synced": synced})

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, salon_id: UUID, appointment_id: UUID) -> OperationResult[AppointmentDTO]:
        try:
            salon, tz = self._get_salon(salon_id)
            appointment = self._get_appointment(salon.id, appointment_id)
        except DomainError as e:
            return self._fail("get", e)
        return OperationResult.ok(to_appointment_dto(appointment, tz))

    def list_upcoming(
            self,
            salon_id: UUID,
            customer_id: Optional[UUID] = None,
            phone: Optional[str] = None,
            limit: int = 20
    ) -> OperationResult[UpcomingAppointmentsDTO]:
        """Scheduled appointments of a customer (by id or phone) from now on"""
        try:
            salon, tz = self._get_salon(salon_id)
            if customer_id is not None:
                customer = self.catalog.get_customer(customer_id, salon.id)
            elif phone:
                customer = self.catalog.get_customer_by_phone(salon.id, validate_phone(phone))
            else:
                raise ValidationError("A customer id or phone is required")

            if not customer:
                raise CustomerNotFoundError(customer_id or phone)

            appointments = self.appointments.find_upcoming_for_customer(
                salon.id, customer.id, to_utc(self.clock()), limit=limit
            )
        except DomainError as e:
            return self._fail("list_upcoming", e)

        return OperationResult.ok(UpcomingAppointmentsDTO(
            customer_id=customer.id,
            total=len(appointments),
            appointments=[to_appointment_dto(a, tz) for a in appointments],
        ))

    # ------------------------------------------------------------------
    # Internals (raise DomainError)
    # ------------------------------------------------------------------

    def _fail(self, operation: str, error: DomainError) -> OperationResult:
        self.appointments.rollback()
        logger.info(f"Appointment {operation} rejected: {error.code} - {error.message}")
        return OperationResult.fail(error)

    def _get_salon(self, salon_id: UUID) -> Tuple[Salon, ZoneInfo]:
        salon = self.catalog.get_salon(salon_id)
        if not salon:
            raise SalonNotFoundError(salon_id)
        return salon, get_zone(salon.timezone or get_settings().DEFAULT_TIMEZONE)

    def _get_appointment(self, salon_id: UUID, appointment_id: UUID) -> Appointment:
        appointment = self.appointments.find_by_id(salon_id, appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    @staticmethod
    def _ensure_scheduled(appointment: Appointment) -> None:
        if appointment.status != AppointmentStatus.SCHEDULED:
            raise AppointmentNotModifiableError(appointment.status)

    def _resolve_booking(self, salon_id: UUID, professional_id: UUID, service_id: UUID) -> Tuple[Professional, Service]:
        professional = self.catalog.get_professional(professional_id, salon_id)
        if not professional:
            raise ProfessionalNotFoundError(professional_id)
        service = self.catalog.get_service(service_id, salon_id)
        if not service:
            raise ServiceNotFoundError(service_id)

        if not professional.is_active:
            raise ProfessionalInactiveError(f'Professional "{professional.name}" is not taking appointments')
        if not service.is_bookable():
            raise ServiceNotBookableError(service.name)
        if not professional.can_perform_service(service.id):
            raise ProfessionalCannotPerformServiceError(professional.name, service.name)

        return professional, service

    def _ensure_bookable(
            self,
            professional: Professional,
            start: datetime,
            end: datetime,
            exclude_id: Optional[UUID] = None
    ) -> None:
        """Must be called while holding the professional's booking lock"""
        self.conflicts.ensure_free(professional.id, start, end, exclude_appointment_id=exclude_id)
        if not self.availability.is_within_open_hours_for(professional, start, end):
            raise SlotUnavailableError()

    @staticmethod
    def _apply_changes(
            appointment: Appointment,
            professional: Professional,
            service: Service,
            start: datetime,
            end: datetime,
            notes: Optional[str]
    ) -> None:
        appointment.professional_id = professional.id
        appointment.service_id = service.id
        appointment.starts_at = start
        appointment.ends_at = end
        if notes is not None:
            appointment.notes = notes
