"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when the admin key is missing or wrong."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class AuthorizationError(ApplicationError):
    """Raised when a proposal password does not unlock the proposal."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class StoreError(ApplicationError):
    """Raised when the row store cannot be opened or a query fails."""

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(message, code="SYS_STORE_UNAVAILABLE")
