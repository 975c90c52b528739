# salon_booking/repositories/appointment_repository.py
"""Appointment store"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from salon_booking.models.appointment import Appointment, AppointmentStatus
from salon_booking.models.professional import Professional


class AppointmentRepository:

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, salon_id: UUID, appointment_id: UUID) -> Optional[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.salon_id == salon_id)
            .first()
        )

    def get(self, appointment_id: UUID) -> Optional[Appointment]:
        """Unscoped lookup used by background sync"""
        return self.db.get(Appointment, appointment_id)

    def find_active_for_professional_between(
            self,
            professional_id: UUID,
            start: datetime,
            end: datetime
    ) -> List[Appointment]:
        """Non-cancelled appointments of the professional overlapping [start, end)"""
        return self.find_conflicting(professional_id, start, end)

    def find_conflicting(
            self,
            professional_id: UUID,
            starts_at: datetime,
            ends_at: datetime,
            exclude_id: Optional[UUID] = None
    ) -> List[Appointment]:
        query = self.db.query(Appointment).filter(
            Appointment.professional_id == professional_id,
            Appointment.status != AppointmentStatus.CANCELLED,
            Appointment.starts_at < ends_at,
            Appointment.ends_at > starts_at,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.starts_at.asc()).all()

    def find_upcoming_for_customer(
            self,
            salon_id: UUID,
            customer_id: UUID,
            now: datetime,
            limit: int = 20
    ) -> List[Appointment]:
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.salon_id == salon_id,
                Appointment.customer_id == customer_id,
                Appointment.status == AppointmentStatus.SCHEDULED,
                Appointment.starts_at >= now,
            )
            .order_by(Appointment.starts_at.asc())
            .limit(limit)
            .all()
        )

    def lock_professional_row(self, professional_id: UUID) -> None:
        """SELECT ... FOR UPDATE on the professional; no-op on SQLite"""
        if self.db.get_bind().dialect.name == "sqlite":
            return
        (
            self.db.query(Professional.id)
            .filter(Professional.id == professional_id)
            .with_for_update()
            .first()
        )

    def add(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def delete(self, appointment: Appointment) -> None:
        self.db.delete(appointment)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, appointment: Appointment) -> Appointment:
        self.db.refresh(appointment)
        return appointment
