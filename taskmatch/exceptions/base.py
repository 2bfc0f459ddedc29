"""Root of the application exception hierarchy."""


class AppException(Exception):
    """Base class for every domain error raised by the service layer.

    `code` is a stable machine-readable identifier exposed to API clients so
    they can branch on the error kind without parsing messages.
    """

    code: str = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        self.message = message
        super().__init__(message)


class StorageError(AppException):
    """Persistence layer failure. Details are logged, never returned to callers."""

    code = "storage_error"
