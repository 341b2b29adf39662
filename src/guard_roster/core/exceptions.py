class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced guard, schedule or absence does not exist."""


class ConflictError(DomainError):
    """Raised when an operation would double-book a slot or repeat a one-time transition."""


class StoreError(DomainError):
    """Raised when the underlying record store fails.

    In-memory state held by the caller may now be ahead of what was persisted.
    """


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
