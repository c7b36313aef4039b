class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class QRPayloadError(DomainError):
    """Raised when scanned text yields no usable attendee identifier."""


class AttendeeNotFoundError(DomainError):
    """Raised when an identifier or number matches no attendee."""

    def __init__(self, reference: object):
        super().__init__(f"No se encontró el asistente '{reference}'")
        self.reference = reference


class DuplicateRegistrationError(ValidationError):
    """Raised when a registration collides with an existing attendee."""


class ScanRateLimitedError(ValidationError):
    """Raised when a scanning station scans again too quickly."""


class DuplicateAttendanceNumberError(DomainError):
    """Raised by the store when an attendance number is already taken."""

    def __init__(self, number: int):
        super().__init__(f"El número de asistencia {number} ya está asignado")
        self.number = number


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot complete a read or write."""
