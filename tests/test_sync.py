"""
Tests for calendar sync: the Google implementation with a fake calendar,
the fire-and-log use cases and the dispatchers.
"""
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from cryptography.fernet import Fernet
from googleapiclient.errors import HttpError

from conftest import RecordingSyncService, at, make_appointment, make_professional
from salon_booking.core.errors import SyncError
from salon_booking.models import Appointment, CalendarIntegration
from salon_booking.models.appointment import SyncStatus
from salon_booking.services.calendar.google_calendar_service import GoogleCalendarService
from salon_booking.services.sync.dispatcher import (
    CelerySyncDispatcher,
    InlineSyncDispatcher,
    ThreadSyncDispatcher,
    build_sync_service,
)
from salon_booking.services.sync.external_sync_service import NullSyncService
from salon_booking.services.sync.google_calendar_sync import GoogleCalendarSyncService
from salon_booking.services.sync.sync_use_cases import (
    ACTION_CREATE,
    ACTION_DELETE,
    SyncAppointmentCreation,
    SyncAppointmentDeletion,
    build_use_case,
)


class FakeCalendar:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        if self.fail:
            raise RuntimeError("calendar down")

    def create_event(self, integration, db, calendar_id, body):
        self._record("create", calendar_id, body)
        return "evt-123"

    def update_event(self, integration, db, calendar_id, event_id, body):
        self._record("update", calendar_id, event_id)
        return event_id

    def delete_event(self, integration, db, calendar_id, event_id):
        self._record("delete", calendar_id, event_id)


@pytest.fixture
def integration(db, salon):
    integration = CalendarIntegration(salon_id=salon.id, provider="google", is_active=True)
    db.add(integration)
    db.commit()
    return integration


@pytest.fixture
def calendar_professional(db, salon, service):
    return make_professional(db, salon, services=[service], name="Bia", calendar_id="bia@salon.test")


@pytest.fixture
def appointment(db, salon, customer, calendar_professional, service):
    return make_appointment(db, salon, customer, calendar_professional, service, at(9), at(9, 30))


def reload(session_factory, appointment_id):
    session = session_factory()
    try:
        return session.get(Appointment, appointment_id)
    finally:
        session.close()


class TestGoogleCalendarSyncService:

    def test_create_stores_event_id(self, session_factory, integration, appointment):
        calendar = FakeCalendar()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=lambda: calendar)

        sync.sync_create(appointment.id)

        stored = reload(session_factory, appointment.id)
        assert stored.sync_status == SyncStatus.SYNCED
        assert stored.google_event_id == "evt-123"
        assert stored.sync_attempts == 1
        assert stored.last_synced_at is not None
        action, calendar_id, body = calendar.calls[0]
        assert (action, calendar_id) == ("create", "bia@salon.test")
        assert body["summary"] == "Corte - Carla"
        assert body["start"]["timeZone"] == "America/Sao_Paulo"
        assert body["extendedProperties"]["private"]["appointment_id"] == str(appointment.id)

    def test_accepts_string_ids(self, session_factory, integration, appointment):
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=FakeCalendar)

        sync.sync_create(str(appointment.id))

        assert reload(session_factory, appointment.id).sync_status == SyncStatus.SYNCED

    def test_update_patches_existing_event(self, db, session_factory, integration, appointment):
        appointment.google_event_id = "evt-9"
        db.commit()
        calendar = FakeCalendar()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=lambda: calendar)

        sync.sync_update(appointment.id)

        assert calendar.calls == [("update", "bia@salon.test", "evt-9")]

    def test_update_without_event_creates_one(self, session_factory, integration, appointment):
        calendar = FakeCalendar()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=lambda: calendar)

        sync.sync_update(appointment.id)

        assert calendar.calls[0][0] == "create"
        assert reload(session_factory, appointment.id).google_event_id == "evt-123"

    def test_delete_removes_event(self, db, session_factory, integration, appointment):
        appointment.google_event_id = "evt-9"
        db.commit()
        calendar = FakeCalendar()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=lambda: calendar)

        sync.sync_delete(appointment.id)

        assert calendar.calls == [("delete", "bia@salon.test", "evt-9")]

    def test_failure_is_recorded_and_raised(self, session_factory, integration, appointment):
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=lambda: FakeCalendar(fail=True))

        with pytest.raises(SyncError):
            sync.sync_create(appointment.id)

        stored = reload(session_factory, appointment.id)
        assert stored.sync_status == SyncStatus.FAILED
        assert stored.sync_attempts == 1
        assert stored.last_sync_error == "calendar down"

    def test_disabled_without_integration(self, session_factory, appointment):
        factory = MagicMock()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=factory)

        sync.sync_create(appointment.id)

        assert reload(session_factory, appointment.id).sync_status == SyncStatus.DISABLED
        factory.assert_not_called()

    def test_disabled_without_professional_calendar(self, db, session_factory, integration, salon, customer, professional, service):
        booked = make_appointment(db, salon, customer, professional, service, at(9), at(9, 30))
        factory = MagicMock()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=factory)

        sync.sync_create(booked.id)

        assert reload(session_factory, booked.id).sync_status == SyncStatus.DISABLED
        factory.assert_not_called()

    def test_unknown_appointment_is_skipped(self, session_factory, integration):
        factory = MagicMock()
        sync = GoogleCalendarSyncService(session_factory, calendar_service_factory=factory)

        sync.sync_delete(uuid.uuid4())

        factory.assert_not_called()


class TestGoogleCalendarService:

    @pytest.fixture
    def key(self):
        return Fernet.generate_key().decode()

    def test_requires_encryption_key(self):
        with pytest.raises(ValueError):
            GoogleCalendarService(encryption_key="")

    def test_uses_stored_token_while_fresh(self, key):
        calendar = GoogleCalendarService(encryption_key=key)
        integration = CalendarIntegration(
            access_token_encrypted=calendar.fernet.encrypt(b"access"),
            refresh_token_encrypted=calendar.fernet.encrypt(b"refresh"),
            token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        )

        credentials = calendar.get_valid_credentials(integration, MagicMock())

        assert credentials.token == "access"
        assert credentials.refresh_token == "refresh"

    @pytest.mark.parametrize("expires_in", [None, timedelta(minutes=2), timedelta(minutes=-10)])
    def test_refreshes_when_expiring(self, key, expires_in):
        calendar = GoogleCalendarService(encryption_key=key)
        integration = CalendarIntegration(
            token_expires_at=datetime.now(timezone.utc) + expires_in if expires_in else None,
        )

        with patch.object(calendar, "refresh_access_token", return_value="refreshed") as refresh:
            assert calendar.get_valid_credentials(integration, MagicMock()) == "refreshed"
        refresh.assert_called_once()

    def test_refresh_stores_new_token(self, key):
        calendar = GoogleCalendarService(encryption_key=key)
        integration = CalendarIntegration(refresh_token_encrypted=calendar.fernet.encrypt(b"refresh"))
        db = MagicMock()
        refreshed = MagicMock(token="new-access", expiry=datetime(2030, 1, 1, 12, 0))

        with patch(
            "salon_booking.services.calendar.google_calendar_service.Credentials",
            return_value=refreshed,
        ):
            calendar.refresh_access_token(integration, db)

        refreshed.refresh.assert_called_once()
        assert calendar.fernet.decrypt(integration.access_token_encrypted) == b"new-access"
        assert integration.token_expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        db.commit.assert_called_once()

    @pytest.mark.parametrize("status", [404, 410])
    def test_delete_of_missing_event_is_ignored(self, key, status):
        calendar = GoogleCalendarService(encryption_key=key)
        events = MagicMock()
        events.delete.return_value.execute.side_effect = HttpError(httplib2.Response({"status": status}), b"")

        with patch.object(calendar, "_events", return_value=events):
            calendar.delete_event(CalendarIntegration(), MagicMock(), "cal", "evt-1")

    def test_other_delete_errors_propagate(self, key):
        calendar = GoogleCalendarService(encryption_key=key)
        events = MagicMock()
        events.delete.return_value.execute.side_effect = HttpError(httplib2.Response({"status": 500}), b"")

        with patch.object(calendar, "_events", return_value=events):
            with pytest.raises(HttpError):
                calendar.delete_event(CalendarIntegration(), MagicMock(), "cal", "evt-1")


class TestUseCases:

    def test_success(self):
        service = RecordingSyncService()
        appointment_id = uuid.uuid4()

        assert SyncAppointmentCreation(service).execute(appointment_id) is True
        assert service.calls == [("create", appointment_id)]

    def test_failure_is_swallowed(self):
        service = RecordingSyncService(fail=True)

        assert SyncAppointmentDeletion(service).execute(uuid.uuid4()) is False

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            build_use_case("archive", RecordingSyncService())


class TestDispatchers:

    def test_inline_runs_immediately(self):
        service = RecordingSyncService()
        appointment_id = uuid.uuid4()

        InlineSyncDispatcher(service).dispatch(ACTION_CREATE, appointment_id)

        assert service.calls == [("create", appointment_id)]

    def test_run_now_reports_outcome(self):
        assert InlineSyncDispatcher(RecordingSyncService()).run_now(ACTION_DELETE, uuid.uuid4()) is True
        assert InlineSyncDispatcher(RecordingSyncService(fail=True)).run_now(ACTION_DELETE, uuid.uuid4()) is False

    def test_thread_pool(self):
        service = RecordingSyncService()
        dispatcher = ThreadSyncDispatcher(service, max_workers=2)
        appointment_id = uuid.uuid4()

        future = dispatcher.dispatch(ACTION_CREATE, appointment_id)

        assert future.result(timeout=5) is True
        dispatcher.shutdown()
        assert service.calls == [("create", appointment_id)]

    def test_celery_enqueues_string_id(self):
        from salon_booking.tasks.calendar_tasks import sync_appointment_task

        appointment_id = uuid.uuid4()
        with patch.object(sync_appointment_task, "delay") as delay:
            CelerySyncDispatcher(NullSyncService()).dispatch(ACTION_CREATE, appointment_id)

        delay.assert_called_once_with(ACTION_CREATE, str(appointment_id))

    def test_celery_broker_failure_is_logged(self):
        from salon_booking.tasks.calendar_tasks import sync_appointment_task

        with patch.object(sync_appointment_task, "delay", side_effect=ConnectionError("broker down")):
            CelerySyncDispatcher(NullSyncService()).dispatch(ACTION_CREATE, uuid.uuid4())

    def test_disabled_backend(self):
        assert isinstance(build_sync_service("disabled"), NullSyncService)


class TestSyncTask:

    def test_runs_single_attempt(self):
        from salon_booking.tasks import calendar_tasks

        service = RecordingSyncService()
        appointment_id = str(uuid.uuid4())
        with patch.object(calendar_tasks, "GoogleCalendarSyncService", return_value=service):
            outcome = calendar_tasks.sync_appointment_task.apply(args=(ACTION_CREATE, appointment_id)).get()

        assert outcome == {"status": "synced", "action": ACTION_CREATE, "appointment_id": appointment_id}
        assert service.calls == [("create", appointment_id)]

    def test_reports_failure(self):
        from salon_booking.tasks import calendar_tasks

        with patch.object(calendar_tasks, "GoogleCalendarSyncService", return_value=RecordingSyncService(fail=True)):
            outcome = calendar_tasks.sync_appointment_task.apply(args=(ACTION_DELETE, "abc")).get()

        assert outcome["status"] == "failed"
