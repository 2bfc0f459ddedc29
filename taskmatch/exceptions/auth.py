"""Authentication and authorization exceptions."""

from taskmatch.exceptions.base import AppException


class AuthenticationError(AppException):
    """Base class for authentication-related errors."""

    code = "not_authenticated"


class InvalidTokenError(AuthenticationError):
    """Token is invalid, expired, or malformed."""

    code = "invalid_token"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class InsufficientPermissionsError(AuthenticationError):
    """Caller doesn't own the resource or lacks the required role."""

    code = "forbidden"

    def __init__(self, message: str = "Insufficient permissions"):
        """
        Initialize InsufficientPermissionsError with an optional message describing the permission failure.

        Parameters:
            message (str): Human-readable error message; defaults to "Insufficient permissions".
        """
        super().__init__(message)
