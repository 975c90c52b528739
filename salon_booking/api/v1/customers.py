# salon_booking/api/v1/customers.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from salon_booking.api.dependencies import get_customer_service, get_lifecycle_service
from salon_booking.api.responses import result_response
from salon_booking.schemas.customer import IdentifyCustomerRequest, UpdatePreferencesRequest
from salon_booking.services.appointment.appointment_service import AppointmentLifecycleService
from salon_booking.services.customer.customer_service import CustomerService

router = APIRouter(tags=["customers"])


@router.post("/salons/{salon_id}/customers/identify")
def identify_customer(
        salon_id: UUID,
        request: IdentifyCustomerRequest,
        service: CustomerService = Depends(get_customer_service)
):
    """Look a customer up by phone, registering them when a name is given"""
    return result_response(service.identify(salon_id, request.phone, name=request.name))


@router.patch("/salons/{salon_id}/customers/{customer_id}/preferences")
def update_customer_preferences(
        salon_id: UUID,
        customer_id: UUID,
        request: UpdatePreferencesRequest,
        service: CustomerService = Depends(get_customer_service)
):
    return result_response(service.update_preferences(salon_id, customer_id, request.preferences))


@router.get("/salons/{salon_id}/customers/{customer_id}/appointments/upcoming")
def list_upcoming_appointments(
        salon_id: UUID,
        customer_id: UUID,
        limit: Optional[int] = Query(20, ge=1, le=100),
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    return result_response(service.list_upcoming(salon_id, customer_id=customer_id, limit=limit))
