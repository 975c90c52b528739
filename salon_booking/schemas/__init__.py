# salon_booking/schemas/__init__.py
from .availability import (
    TimeSlot,
    AvailabilityResponse,
    RuleWindow,
    DayRules,
    ProfessionalRulesDTO
)

from .appointment import (
    AppointmentCreateRequest,
    AppointmentUpdateRequest,
    AppointmentCancelRequest,
    AppointmentDTO,
    UpcomingAppointmentsDTO
)

from .customer import (
    IdentifyCustomerRequest,
    CustomerDTO,
    IdentifyCustomerResult,
    UpdatePreferencesRequest
)

__all__ = [
    "TimeSlot",
    "AvailabilityResponse",
    "RuleWindow",
    "DayRules",
    "ProfessionalRulesDTO",
    "AppointmentCreateRequest",
    "AppointmentUpdateRequest",
    "AppointmentCancelRequest",
    "AppointmentDTO",
    "UpcomingAppointmentsDTO",
    "IdentifyCustomerRequest",
    "CustomerDTO",
    "IdentifyCustomerResult",
    "UpdatePreferencesRequest",
]
