# salon_booking/api/v1/availability.py
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from salon_booking.api.dependencies import get_availability_service
from salon_booking.api.responses import error_response
from salon_booking.core.errors import DomainError
from salon_booking.services.availability.availability_service import AvailabilityService

router = APIRouter(tags=["availability"])


@router.get("/salons/{salon_id}/professionals/{professional_id}/availability")
def get_availability(
        salon_id: UUID,
        professional_id: UUID,
        day: date = Query(..., alias="date", description="Local date, YYYY-MM-DD"),
        service_id: Optional[UUID] = Query(None),
        duration: Optional[int] = Query(None, description="Minutes, when no service is given"),
        service: AvailabilityService = Depends(get_availability_service)
):
    """Bookable slots of a professional on a local day, sized by a service or a duration"""
    try:
        availability = service.get_availability(
            salon_id, professional_id, day, service_id=service_id, duration=duration
        )
    except DomainError as e:
        return error_response(e)
    return {"success": True, "data": availability.model_dump(mode="json")}


@router.get("/salons/{salon_id}/professionals/{professional_id}/availability-rules")
def get_availability_rules(
        salon_id: UUID,
        professional_id: UUID,
        service: AvailabilityService = Depends(get_availability_service)
):
    """Recurring weekly rules of a professional"""
    try:
        rules = service.get_professional_rules(professional_id, salon_id=salon_id)
    except DomainError as e:
        return error_response(e)
    return {"success": True, "data": rules.model_dump(mode="json")}
