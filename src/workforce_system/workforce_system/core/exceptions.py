class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule (email, PIN, open check-in)."""


class NotFoundError(DomainError):
    """Raised when operating on an entity that no longer exists."""


class InvalidTransitionError(ValidationError):
    """Raised when a shift status change is not allowed by the lifecycle."""


class LocationUnavailableError(DomainError):
    """Raised when no device coordinates can be obtained at check-in time."""


class StorageError(DomainError):
    """Raised when the underlying key-value store fails to read or write."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConcurrentUpdateError(ConflictError):
    """Raised when a stored collection changed between read and write."""
