class DomainError(Exception):
    """Base exception for attendance rule violations and backend failures."""


class FormatError(DomainError):
    """Raised when a date value matches neither the ISO nor the DD.MM.YYYY form."""


class MissingTargetError(DomainError):
    """Raised when a submission has no club or no date selected."""


class AlreadyFinalizedError(DomainError):
    """Raised when submitting a draft built from a locked record."""


class ConflictError(DomainError):
    """Raised when the backend already holds a record for the same club and date."""


class ValidationError(DomainError):
    """Raised when input data is invalid or the backend rejects a payload."""


class AuthError(DomainError):
    """Raised when the session token is missing, invalid or expired."""


class NotFoundError(DomainError):
    """Raised when a club, record or student cannot be found."""


class TransportError(DomainError):
    """Raised when the backend is unreachable or answers unexpectedly."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DraftDiscardedError(DomainError):
    """Raised when submitting a draft whose editing session was already closed."""
