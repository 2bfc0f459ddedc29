"""HTTP error handlers for FastAPI application.

This module provides the bridge between application exceptions and HTTP responses.
It maps domain-level exceptions to appropriate HTTP status codes and response formats.

Every body has the shape `{"detail": str, "code": str}`, plus `field` for
validation errors that point at a specific input.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from taskmatch.exceptions import (
    AppException,
    NotFoundError,
    AlreadyExistsError,
    ValidationError,
    AuthenticationError,
    InsufficientPermissionsError,
    ConflictError,
    StorageError,
)
from taskmatch.utils.logger import logger


def _error_body(exc: AppException) -> dict:
    return {"detail": str(exc), "code": exc.code}


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Map a NotFoundError to an HTTP 404 JSON response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (NotFoundError): The exception indicating that a requested resource was not found.

    Returns:
        JSONResponse: Response with status 404 and the exception message and code.
    """
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(exc))


async def conflict_handler(
    request: Request, exc: ConflictError | AlreadyExistsError
) -> JSONResponse:
    """
    Convert a conflict with the current resource state into an HTTP 409 response.

    Covers duplicate resources as well as the task lifecycle conflicts (full task,
    duplicate application, illegal status move, ...). The `code` tells them apart.
    """
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body(exc))


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Convert a ValidationError into an HTTP 422 Unprocessable Entity JSON response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (ValidationError): The domain validation error; if `exc.field` is set, the response will include a `field` key indicating the related field.

    Returns:
        JSONResponse: Response with status 422 and a JSON body containing `detail`, `code` and, when available, `field`.
    """
    content = _error_body(exc)
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=content
    )


async def insufficient_permissions_handler(
    request: Request, exc: InsufficientPermissionsError
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=_error_body(exc))


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """
    Convert an AuthenticationError into a 401 Unauthorized JSON response that includes a WWW-Authenticate header.

    Returns:
        JSONResponse: Response with status 401 and `WWW-Authenticate: Bearer` header.
    """
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=_error_body(exc),
        headers={"WWW-Authenticate": "Bearer"},  # RFC 6750
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle unhandled application-level exceptions and produce a standardized 500 Internal Server Error response.

    The original message is logged but never returned to the client.

    Returns:
        JSONResponse: HTTP 500 response with a generic detail and the exception code.
    """
    if not isinstance(exc, StorageError):
        logger.error(f"Unhandled application error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred", "code": exc.code},
    )


def register_exception_handlers(app) -> None:
    """
    Register the application's domain-to-HTTP exception handlers on a FastAPI app.

    The following mappings are added: NotFoundError -> 404, AlreadyExistsError and
    ConflictError -> 409, ValidationError -> 422 (includes optional `field`),
    InsufficientPermissionsError -> 403, AuthenticationError -> 401 (adds
    `WWW-Authenticate: Bearer`), and AppException -> 500.

    Parameters:
        app: The FastAPI application instance to which the exception handlers will be attached.
    """
    # CRUD exception handlers
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(AlreadyExistsError, conflict_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Task lifecycle conflicts
    app.add_exception_handler(ConflictError, conflict_handler)

    # Auth exception handlers (specific before general)
    app.add_exception_handler(
        InsufficientPermissionsError, insufficient_permissions_handler
    )
    app.add_exception_handler(AuthenticationError, authentication_error_handler)

    # Catch-all for unhandled application exceptions
    app.add_exception_handler(AppException, app_exception_handler)
