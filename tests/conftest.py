"""
Shared fixtures: a file-backed SQLite database per test, a seeded salon
catalog and service factories wired the way the API wires them.
"""
import os

# Must be set before salon_booking builds its engine and settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SYNC_BACKEND"] = "disabled"
os.environ["BOOKING_LOCK_BACKEND"] = "local"

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest
from sqlalchemy.orm import sessionmaker

from salon_booking.config.database import build_engine, create_tables
from salon_booking.models import (
    Appointment,
    AppointmentStatus,
    AvailabilityRule,
    Customer,
    Professional,
    Salon,
    ScheduleOverride,
    Service,
)
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.repositories.availability_repository import (
    AvailabilityRuleRepository,
    ScheduleOverrideRepository,
)
from salon_booking.repositories.catalog_repository import CatalogRepository
from salon_booking.services.appointment.appointment_service import AppointmentLifecycleService
from salon_booking.services.appointment.booking_lock import LocalBookingLocks
from salon_booking.services.appointment.conflict_detector import ConflictDetector
from salon_booking.services.availability.availability_service import AvailabilityService
from salon_booking.services.sync.dispatcher import InlineSyncDispatcher
from salon_booking.services.sync.external_sync_service import ExternalSyncService

SAO_PAULO = "America/Sao_Paulo"

# 2026-10-19 is a Monday; Sao Paulo is UTC-3 all year
MONDAY = date(2026, 10, 19)
SUNDAY_BEFORE = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def at(hour, minute=0, day=MONDAY, tz=SAO_PAULO):
    """Aware local datetime in the salon's zone"""
    return datetime.combine(day, time(hour, minute), tzinfo=ZoneInfo(tz))


class RecordingSyncService(ExternalSyncService):
    """Records sync calls; optionally fails every call"""

    def __init__(self, fail: bool = False, on_call=None):
        self.calls = []
        self.fail = fail
        self.on_call = on_call

    def _record(self, action, appointment_id):
        self.calls.append((action, appointment_id))
        if self.on_call:
            self.on_call(action, appointment_id)
        if self.fail:
            raise RuntimeError("calendar unavailable")

    def sync_create(self, appointment_id):
        self._record("create", appointment_id)

    def sync_update(self, appointment_id):
        self._record("update", appointment_id)

    def sync_delete(self, appointment_id):
        self._record("delete", appointment_id)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'salon_booking.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(SUNDAY_BEFORE)


# ============================================================================
# Catalog
# ============================================================================

def make_salon(db, name="Studio Bela", tz=SAO_PAULO, settings=None):
    salon = Salon(name=name, timezone=tz, settings=settings if settings is not None else {}, business_hours={
        "1": {"start": "09:00", "end": "18:00"},
    })
    db.add(salon)
    db.commit()
    return salon


def make_service(db, salon, name="Corte", duration=30, active=True):
    service = Service(salon_id=salon.id, name=name, duration_minutes=duration, price=50, is_active=active)
    db.add(service)
    db.commit()
    return service


def make_professional(db, salon, services=(), name="Ana", active=True, calendar_id=None):
    professional = Professional(
        salon_id=salon.id,
        name=name,
        is_active=active,
        google_calendar_id=calendar_id,
        services=list(services),
    )
    db.add(professional)
    db.commit()
    return professional


def add_rule(db, professional, day, start, end, is_break=False):
    rule = AvailabilityRule(
        professional_id=professional.id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        is_break=is_break,
    )
    db.add(rule)
    db.commit()
    return rule


def add_override(db, salon, start, end, professional=None, reason="Time off"):
    override = ScheduleOverride(
        salon_id=salon.id,
        professional_id=professional.id if professional else None,
        start_time=start,
        end_time=end,
        reason=reason,
    )
    db.add(override)
    db.commit()
    return override


def make_customer(db, salon, name="Carla", phone="11987654321"):
    customer = Customer(salon_id=salon.id, name=name, phone=phone, preferences={})
    db.add(customer)
    db.commit()
    return customer


def make_appointment(db, salon, customer, professional, service, starts_at, ends_at, status=AppointmentStatus.SCHEDULED):
    appointment = Appointment(
        salon_id=salon.id,
        customer_id=customer.id,
        professional_id=professional.id,
        service_id=service.id,
        starts_at=starts_at,
        ends_at=ends_at,
        status=status,
    )
    db.add(appointment)
    db.commit()
    return appointment


@pytest.fixture
def salon(db):
    return make_salon(db, settings={"slot_granularity_minutes": 30})


@pytest.fixture
def service(db, salon):
    return make_service(db, salon)


@pytest.fixture
def professional(db, salon, service):
    return make_professional(db, salon, services=[service])


@pytest.fixture
def working_professional(db, professional):
    """Works Mondays 09:00-18:00 local time"""
    add_rule(db, professional, 1, "09:00", "18:00")
    return professional


@pytest.fixture
def customer(db, salon):
    return make_customer(db, salon)


# ============================================================================
# Services
# ============================================================================

def build_availability(db, clock, **kwargs):
    return AvailabilityService(
        catalog=CatalogRepository(db),
        rules=AvailabilityRuleRepository(db),
        overrides=ScheduleOverrideRepository(db),
        appointments=AppointmentRepository(db),
        clock=clock,
        **kwargs
    )


def build_lifecycle(db, clock, sync_service=None, locks=None):
    appointments = AppointmentRepository(db)
    catalog = CatalogRepository(db)
    return AppointmentLifecycleService(
        catalog=catalog,
        appointments=appointments,
        availability=build_availability(db, clock),
        conflicts=ConflictDetector(appointments),
        locks=locks or LocalBookingLocks(timeout=5),
        sync=InlineSyncDispatcher(sync_service or RecordingSyncService()),
        clock=clock,
    )


@pytest.fixture
def availability(db, clock):
    return build_availability(db, clock)


@pytest.fixture
def sync_service():
    return RecordingSyncService()


@pytest.fixture
def lifecycle(db, clock, sync_service):
    return build_lifecycle(db, clock, sync_service=sync_service)
