class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ForbiddenError(DomainError):
    """Raised when a caller lacks permission for an action."""

    status_code = 403


class InvalidAdminCodeError(ForbiddenError):
    """Raised when the admin verification code on a registration is wrong."""

    status_code = 400


class ConflictError(DomainError):
    """Raised on duplicates or when a request was already processed."""


class NotFoundError(DomainError):
    status_code = 404


class AuthenticationError(DomainError):
    """Raised when a caller cannot be authenticated."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Generic login failure; never reveals whether the account exists."""


class RegistrationPendingError(AuthenticationError):
    pass


class RegistrationRejectedError(AuthenticationError):
    pass


class InvalidTokenError(DomainError):
    """Raised when a password reset token is unknown or expired."""


class ServiceUnavailableError(DomainError):
    """Raised when a dependency (database, mail server) fails."""

    status_code = 500


class StorageError(Exception):
    """Raised by repositories when the store rejects an operation."""


class DuplicateKeyError(StorageError):
    """Raised when a write violates a unique index."""
