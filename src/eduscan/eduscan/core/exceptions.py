class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(ValidationError):
    """Raised when a user lacks permission for an action."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class CameraError(DomainError):
    """Raised when the capture device cannot be opened or read."""


class AnalysisError(DomainError):
    """Raised when the face analyzer fails or returns a malformed verdict."""
