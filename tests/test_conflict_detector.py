import uuid

import pytest

from conftest import at, make_appointment, make_professional
from salon_booking.core.errors import AppointmentConflictError
from salon_booking.models import AppointmentStatus
from salon_booking.repositories.appointment_repository import AppointmentRepository
from salon_booking.services.appointment.conflict_detector import ConflictDetector


@pytest.fixture
def detector(db):
    return ConflictDetector(AppointmentRepository(db))


@pytest.fixture
def booked(db, salon, customer, professional, service):
    """10:00-11:00 local"""
    return make_appointment(db, salon, customer, professional, service, at(10), at(11))


class TestFindConflicts:

    @pytest.mark.parametrize("start,end", [
        (at(10), at(11)),
        (at(9, 30), at(10, 30)),
        (at(10, 30), at(11, 30)),
        (at(10, 15), at(10, 45)),
        (at(9), at(12)),
    ])
    def test_overlaps(self, detector, booked, professional, start, end):
        assert [a.id for a in detector.find_conflicts(professional.id, start, end)] == [booked.id]

    @pytest.mark.parametrize("start,end", [
        (at(9), at(10)),
        (at(11), at(12)),
    ])
    def test_touching_is_not_a_conflict(self, detector, booked, professional, start, end):
        assert detector.find_conflicts(professional.id, start, end) == []

    def test_cancelled_is_ignored(self, db, detector, booked, professional):
        booked.status = AppointmentStatus.CANCELLED
        db.commit()

        assert detector.find_conflicts(professional.id, at(10), at(11)) == []

    def test_completed_still_blocks(self, db, detector, booked, professional):
        booked.status = AppointmentStatus.COMPLETED
        db.commit()

        assert len(detector.find_conflicts(professional.id, at(10), at(11))) == 1

    def test_excluding_the_appointment_itself(self, detector, booked, professional):
        assert detector.find_conflicts(professional.id, at(10), at(11), exclude_appointment_id=booked.id) == []

    def test_other_professional(self, db, detector, booked, salon):
        other = make_professional(db, salon, name="Bruno")

        assert detector.find_conflicts(other.id, at(10), at(11)) == []

    def test_results_are_ordered(self, db, detector, salon, customer, professional, service):
        late = make_appointment(db, salon, customer, professional, service, at(14), at(15))
        early = make_appointment(db, salon, customer, professional, service, at(9), at(10))

        found = detector.find_conflicts(professional.id, at(8), at(18))

        assert [a.id for a in found] == [early.id, late.id]


class TestEnsureFree:

    def test_raises_with_conflicting_ids(self, detector, booked, professional):
        with pytest.raises(AppointmentConflictError) as exc_info:
            detector.ensure_free(professional.id, at(10, 30), at(11, 30))

        assert exc_info.value.conflicting_ids == [str(booked.id)]
        assert exc_info.value.code == "APPOINTMENT_CONFLICT"

    def test_free_interval(self, detector, booked, professional):
        detector.ensure_free(professional.id, at(11), at(11, 30))

    def test_unknown_professional_has_no_bookings(self, detector):
        detector.ensure_free(uuid.uuid4(), at(10), at(11))
