"""
API v1 router setup
"""
from fastapi import APIRouter

from salon_booking.api.v1 import appointments, availability, customers

api_v1_router = APIRouter()

api_v1_router.include_router(availability.router, tags=["Availability"])
api_v1_router.include_router(appointments.router, tags=["Appointments"])
api_v1_router.include_router(customers.router, tags=["Customers"])


@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """API information and available endpoints"""
    return {
        "version": "1.0",
        "resources": {
            "availability": "/api/v1/salons/{salon_id}/professionals/{professional_id}/availability",
            "availability_rules": "/api/v1/salons/{salon_id}/professionals/{professional_id}/availability-rules",
            "appointments": "/api/v1/salons/{salon_id}/appointments",
            "customers": "/api/v1/salons/{salon_id}/customers/identify",
        }
    }
