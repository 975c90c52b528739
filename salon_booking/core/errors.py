# salon_booking/core/errors.py
"""
Domain error taxonomy for the scheduling core.

Services raise these internally; the public operations of the lifecycle
manager catch them and hand them back inside an OperationResult, so callers
only ever see exceptions for infrastructure failures.
"""
from typing import Optional


class DomainError(Exception):
    """Base class for expected business failures"""
    code = "DOMAIN_ERROR"
    default_message = "Operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


# ============================================================================
# Validation
# ============================================================================

class ValidationError(DomainError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidPhoneError(ValidationError):
    code = "INVALID_PHONE"

    def __init__(self, phone: Optional[str] = None):
        super().__init__(f"Invalid phone number: {phone}" if phone else "The phone number is invalid")


class ProfessionalCannotPerformServiceError(ValidationError):
    code = "PROFESSIONAL_CANNOT_PERFORM_SERVICE"

    def __init__(self, professional_name: Optional[str] = None, service_name: Optional[str] = None):
        if professional_name and service_name:
            message = f'Professional "{professional_name}" does not perform "{service_name}"'
        else:
            message = "The professional does not perform this service"
        super().__init__(message)


class ServiceNotBookableError(ValidationError):
    code = "SERVICE_NOT_BOOKABLE"

    def __init__(self, service_name: Optional[str] = None):
        super().__init__(
            f'Service "{service_name}" is not available for booking'
            if service_name else "The service is not available for booking"
        )


class ProfessionalInactiveError(ValidationError):
    code = "PROFESSIONAL_INACTIVE"
    default_message = "The professional is not taking appointments"


class AppointmentNotModifiableError(ValidationError):
    code = "APPOINTMENT_NOT_MODIFIABLE"

    def __init__(self, status: Optional[str] = None):
        super().__init__(
            f"Appointments with status '{status}' cannot be changed"
            if status else "The appointment cannot be changed"
        )


# ============================================================================
# Not found
# ============================================================================

class NotFoundError(DomainError):
    code = "NOT_FOUND"
    entity = "Record"

    def __init__(self, entity_id=None):
        super().__init__(
            f"{self.entity} {entity_id} not found" if entity_id else f"{self.entity} not found"
        )


class SalonNotFoundError(NotFoundError):
    code = "SALON_NOT_FOUND"
    entity = "Salon"


class ProfessionalNotFoundError(NotFoundError):
    code = "PROFESSIONAL_NOT_FOUND"
    entity = "Professional"


class ServiceNotFoundError(NotFoundError):
    code = "SERVICE_NOT_FOUND"
    entity = "Service"


class CustomerNotFoundError(NotFoundError):
    code = "CUSTOMER_NOT_FOUND"
    entity = "Customer"


class AppointmentNotFoundError(NotFoundError):
    code = "APPOINTMENT_NOT_FOUND"
    entity = "Appointment"


# ============================================================================
# Conflict
# ============================================================================

class ConflictError(DomainError):
    code = "CONFLICT"
    default_message = "The requested time is not available"


class AppointmentConflictError(ConflictError):
    code = "APPOINTMENT_CONFLICT"
    default_message = "There is already an appointment at this time"

    def __init__(self, message: Optional[str] = None, conflicting_ids=None):
        super().__init__(message)
        self.conflicting_ids = [str(i) for i in (conflicting_ids or [])]


class SlotUnavailableError(ConflictError):
    code = "SLOT_UNAVAILABLE"
    default_message = "The requested time is outside the professional's working hours"


# ============================================================================
# Sync (never fatal)
# ============================================================================

class SyncError(DomainError):
    code = "SYNC_ERROR"
    default_message = "External calendar synchronization failed"


# ============================================================================
# Infrastructure
# ============================================================================

class BookingLockTimeout(Exception):
    """Raised when a professional's booking lock cannot be acquired in time"""

    def __init__(self, professional_id, timeout: float):
        self.professional_id = professional_id
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for booking lock of professional {professional_id}")
