class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity (employee, request) does not exist."""


class DataIntegrityError(DomainError):
    """Raised when stored data breaks an assumption, e.g. two shifts for one employee and day."""


class InvalidTransitionError(DomainError):
    """Raised when a request status change is not allowed from its current status."""
