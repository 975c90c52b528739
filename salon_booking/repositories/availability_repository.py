# salon_booking/repositories/availability_repository.py
"""Availability rule and schedule override stores"""
from datetime import datetime
from typing import List
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from salon_booking.models.availability import AvailabilityRule, ScheduleOverride


class AvailabilityRuleRepository:
    """Recurring weekly rules of professionals"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_professional_and_day(self, professional_id: UUID, day_of_week: int) -> List[AvailabilityRule]:
        return (
            self.db.query(AvailabilityRule)
            .filter(
                AvailabilityRule.professional_id == professional_id,
                AvailabilityRule.day_of_week == day_of_week,
            )
            .order_by(AvailabilityRule.start_time.asc())
            .all()
        )

    def find_by_professional(self, professional_id: UUID) -> List[AvailabilityRule]:
        return (
            self.db.query(AvailabilityRule)
            .filter(AvailabilityRule.professional_id == professional_id)
            .order_by(AvailabilityRule.day_of_week.asc(), AvailabilityRule.start_time.asc())
            .all()
        )

    def add(self, rule: AvailabilityRule) -> AvailabilityRule:
        self.db.add(rule)
        self.db.flush()
        return rule


class ScheduleOverrideRepository:
    """One-off blocked periods, salon wide or per professional"""

    def __init__(self, db: Session):
        self.db = db

    def find_intersecting(
            self,
            salon_id: UUID,
            professional_id: UUID,
            start: datetime,
            end: datetime
    ) -> List[ScheduleOverride]:
        """Overrides overlapping [start, end) that apply to the professional"""
        return (
            self.db.query(ScheduleOverride)
            .filter(
                ScheduleOverride.salon_id == salon_id,
                or_(
                    ScheduleOverride.professional_id.is_(None),
                    ScheduleOverride.professional_id == professional_id,
                ),
                ScheduleOverride.start_time < end,
                ScheduleOverride.end_time > start,
            )
            .order_by(ScheduleOverride.start_time.asc())
            .all()
        )

    def add(self, override: ScheduleOverride) -> ScheduleOverride:
        self.db.add(override)
        self.db.flush()
        return override
