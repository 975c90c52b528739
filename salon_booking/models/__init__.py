# salon_booking/models/__init__.py
from .base import Base
from .salon import Salon
from .professional import Professional, ProfessionalRole, professional_services
from .service import Service
from .customer import Customer
from .availability import AvailabilityRule, ScheduleOverride
from .appointment import Appointment, AppointmentStatus, SyncStatus
from .calendar_integration import CalendarIntegration

__all__ = [
    "Base",
    "Salon",
    "Professional",
    "ProfessionalRole",
    "professional_services",
    "Service",
    "Customer",
    "AvailabilityRule",
    "ScheduleOverride",
    "Appointment",
    "AppointmentStatus",
    "SyncStatus",
    "CalendarIntegration",
]
