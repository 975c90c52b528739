# salon_booking/api/v1/appointments.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from salon_booking.api.dependencies import get_lifecycle_service
from salon_booking.api.responses import result_response
from salon_booking.schemas.appointment import (
    AppointmentCancelRequest,
    AppointmentCreateRequest,
    AppointmentUpdateRequest,
)
from salon_booking.services.appointment.appointment_service import AppointmentLifecycleService

router = APIRouter(tags=["appointments"])


@router.post("/salons/{salon_id}/appointments")
def create_appointment(
        salon_id: UUID,
        request: AppointmentCreateRequest,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    """Book an appointment; 409 when the professional is busy or off duty"""
    result = service.create(
        salon_id=salon_id,
        customer_id=request.customer_id,
        professional_id=request.professional_id,
        service_id=request.service_id,
        starts_at=request.starts_at,
        notes=request.notes,
    )
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.get("/salons/{salon_id}/appointments/{appointment_id}")
def get_appointment(
        salon_id: UUID,
        appointment_id: UUID,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    return result_response(service.get(salon_id, appointment_id))


@router.patch("/salons/{salon_id}/appointments/{appointment_id}")
def update_appointment(
        salon_id: UUID,
        appointment_id: UUID,
        request: AppointmentUpdateRequest,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    """Reschedule, switch professional or service, or edit notes"""
    result = service.update(
        salon_id,
        appointment_id,
        professional_id=request.professional_id,
        service_id=request.service_id,
        starts_at=request.starts_at,
        notes=request.notes,
    )
    return result_response(result)


@router.post("/salons/{salon_id}/appointments/{appointment_id}/cancel")
def cancel_appointment(
        salon_id: UUID,
        appointment_id: UUID,
        request: Optional[AppointmentCancelRequest] = None,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    reason = request.reason if request else None
    return result_response(service.cancel(salon_id, appointment_id, reason=reason))


@router.post("/salons/{salon_id}/appointments/{appointment_id}/complete")
def complete_appointment(
        salon_id: UUID,
        appointment_id: UUID,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    return result_response(service.complete(salon_id, appointment_id))


@router.delete("/salons/{salon_id}/appointments/{appointment_id}")
def delete_appointment(
        salon_id: UUID,
        appointment_id: UUID,
        service: AppointmentLifecycleService = Depends(get_lifecycle_service)
):
    """Hard delete; the calendar event is removed first"""
    return result_response(service.delete(salon_id, appointment_id))
