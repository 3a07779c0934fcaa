class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee or record does not exist."""


class ConflictError(DomainError):
    """Raised when the store rejects a write on an integrity constraint."""


class StoreUnavailableError(DomainError):
    """Raised when the record store cannot be reached. Safe to retry."""
