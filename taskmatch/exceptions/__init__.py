"""
Application exceptions module.

This module provides a clean separation of concerns for error handling:
- Base exceptions define the hierarchy
- CRUD exceptions handle database operations
- Auth exceptions handle authentication/authorization
- Task exceptions cover the application/roster state machine conflicts
- HTTP mapping is handled separately in taskmatch/core/error_handlers.py
"""

from taskmatch.exceptions.base import AppException, StorageError
from taskmatch.exceptions.crud import (
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
)
from taskmatch.exceptions.auth import (
    AuthenticationError,
    InvalidTokenError,
    InsufficientPermissionsError,
)
from taskmatch.exceptions.task import (
    ConflictError,
    DuplicateApplicationError,
    TaskFullError,
    AlreadyCompletedError,
    TaskNotAcceptingApplicationsError,
    ApplicationAlreadyDecidedError,
    InvalidStatusTransitionError,
    TaskClosedError,
    ApplicationNotFoundError,
    NotARosterMemberError,
)

__all__ = [
    # Base
    "AppException",
    "StorageError",
    # CRUD
    "NotFoundError",
    "AlreadyExistsError",
    "ValidationError",
    # Auth
    "AuthenticationError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    # Task lifecycle
    "ConflictError",
    "DuplicateApplicationError",
    "TaskFullError",
    "AlreadyCompletedError",
    "TaskNotAcceptingApplicationsError",
    "ApplicationAlreadyDecidedError",
    "InvalidStatusTransitionError",
    "TaskClosedError",
    "ApplicationNotFoundError",
    "NotARosterMemberError",
]
