# ============================================================================
# FILE: salon_booking/api/dependencies.py
# Wiring of repositories and services per request
# ============================================================================
from datetime import datetime
from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session

from salon_booking.config.database import get_db
from salon_booking.models.base import utcnow
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.repositories.availability_repository import (
    AvailabilityRuleRepository,
    ScheduleOverrideRepository,
)
from salon_booking.repositories.catalog_repository import CatalogRepository
from salon_booking.services.appointment.appointment_service import AppointmentLifecycleService
from salon_booking.services.appointment.booking_lock import BookingLockProvider, get_booking_locks
from salon_booking.services.appointment.conflict_detector import ConflictDetector
from salon_booking.services.availability.availability_service import AvailabilityService
from salon_booking.services.customer.customer_service import CustomerService
from salon_booking.services.sync.dispatcher import SyncDispatcher, get_sync_dispatcher


def get_clock() -> Callable[[], datetime]:
    return utcnow


def get_availability_service(
        db: Session = Depends(get_db),
        clock: Callable[[], datetime] = Depends(get_clock)
) -> AvailabilityService:
    return AvailabilityService(
        catalog=CatalogRepository(db),
        rules=AvailabilityRuleRepository(db),
        overrides=ScheduleOverrideRepository(db),
        appointments=AppointmentRepository(db),
        clock=clock,
    )


def get_lifecycle_service(
        db: Session = Depends(get_db),
        clock: Callable[[], datetime] = Depends(get_clock),
        locks: BookingLockProvider = Depends(get_booking_locks),
        sync: SyncDispatcher = Depends(get_sync_dispatcher)
) -> AppointmentLifecycleService:
    appointments = AppointmentRepository(db)
    catalog = CatalogRepository(db)
    availability = AvailabilityService(
        catalog=catalog,
        rules=AvailabilityRuleRepository(db),
        overrides=ScheduleOverrideRepository(db),
        appointments=appointments,
        clock=clock,
    )
    return AppointmentLifecycleService(
        catalog=catalog,
        appointments=appointments,
        availability=availability,
        conflicts=ConflictDetector(appointments),
        locks=locks,
        sync=sync,
        clock=clock,
    )


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(CatalogRepository(db))
