# salon_booking/repositories/catalog_repository.py
"""Salon scoped lookups of salons, professionals, services and customers"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from salon_booking.models.customer import Customer
from salon_booking.models.professional import Professional
from salon_booking.models.salon import Salon
from salon_booking.models.service import Service


class CatalogRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_salon(self, salon_id: UUID) -> Optional[Salon]:
        return (
            self.db.query(Salon)
            .filter(Salon.id == salon_id, Salon.is_archived.is_(False))
            .first()
        )

    def get_professional(self, professional_id: UUID, salon_id: Optional[UUID] = None) -> Optional[Professional]:
        query = self.db.query(Professional).filter(Professional.id == professional_id)
        if salon_id is not None:
            query = query.filter(Professional.salon_id == salon_id)
        return query.first()

    def get_service(self, service_id: UUID, salon_id: Optional[UUID] = None) -> Optional[Service]:
        query = self.db.query(Service).filter(Service.id == service_id)
        if salon_id is not None:
            query = query.filter(Service.salon_id == salon_id)
        return query.first()

    def get_customer(self, customer_id: UUID, salon_id: UUID) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.id == customer_id, Customer.salon_id == salon_id)
            .first()
        )

    def get_customer_by_phone(self, salon_id: UUID, phone: str) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.salon_id == salon_id, Customer.phone == phone)
            .first()
        )

    def add_customer(self, customer: Customer) -> Customer:
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def save(self, instance) -> None:
        self.db.commit()
        self.db.refresh(instance)

    def rollback(self) -> None:
        self.db.rollback()
