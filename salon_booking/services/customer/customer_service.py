# salon_booking/services/customer/customer_service.py
"""Customer identification by phone within a salon"""
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError

from salon_booking.core.errors import CustomerNotFoundError, DomainError, SalonNotFoundError, ValidationError
from salon_booking.core.result import OperationResult
from salon_booking.models.customer import Customer
from salon_booking.repositories.catalog_repository import CatalogRepository
from salon_booking.schemas.customer import CustomerDTO, IdentifyCustomerResult
from salon_booking.utils.phone import validate_phone

logger = logging.getLogger(__name__)


def to_customer_dto(customer: Customer) -> CustomerDTO:
    return CustomerDTO(
        id=customer.id,
        salon_id=customer.salon_id,
        name=customer.name,
        phone=customer.phone,
        email=customer.email,
        preferences=dict(customer.preferences or {}),
    )


class CustomerService:

    def __init__(self, catalog: CatalogRepository):
        self.catalog = catalog

    def identify(self, salon_id: UUID, phone: str, name: Optional[str] = None) -> OperationResult[IdentifyCustomerResult]:
        """
        Find a customer by normalized phone. When missing and a name is
        given, the customer is registered; otherwise found=False is returned.
        Customers are never shared across salons.
        """
        try:
            if not self.catalog.get_salon(salon_id):
                raise SalonNotFoundError(salon_id)
            normalized = validate_phone(phone)

            customer = self.catalog.get_customer_by_phone(salon_id, normalized)
            if customer:
                return OperationResult.ok(IdentifyCustomerResult(found=True, customer=to_customer_dto(customer)))

            name = (name or "").strip()
            if not name:
                return OperationResult.ok(IdentifyCustomerResult(found=False))

            try:
                customer = self.catalog.add_customer(Customer(
                    salon_id=salon_id,
                    name=name,
                    phone=normalized,
                    preferences={},
                ))
            except IntegrityError:
                # Registered concurrently with the same phone
                self.catalog.rollback()
                customer = self.catalog.get_customer_by_phone(salon_id, normalized)
                return OperationResult.ok(IdentifyCustomerResult(found=True, customer=to_customer_dto(customer)))

            logger.info(f"Registered customer {customer.id} for salon {salon_id}")
            return OperationResult.ok(IdentifyCustomerResult(
                found=True,
                created=True,
                customer=to_customer_dto(customer),
            ))

        except DomainError as e:
            logger.info(f"Customer identification rejected: {e.code} - {e.message}")
            return OperationResult.fail(e)

    def update_preferences(
            self,
            salon_id: UUID,
            customer_id: UUID,
            preferences: Dict[str, Any]
    ) -> OperationResult[CustomerDTO]:
        """Merge keys into the customer's open preferences map"""
        try:
            if not isinstance(preferences, dict):
                raise ValidationError("Preferences must be an object")
            customer = self.catalog.get_customer(customer_id, salon_id)
            if not customer:
                raise CustomerNotFoundError(customer_id)

            merged = dict(customer.preferences or {})
            merged.update(preferences)
            customer.preferences = merged
            self.catalog.save(customer)

        except DomainError as e:
            logger.info(f"Preference update rejected: {e.code} - {e.message}")
            return OperationResult.fail(e)

        return OperationResult.ok(to_customer_dto(customer))
