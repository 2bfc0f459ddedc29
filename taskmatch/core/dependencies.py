from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from taskmatch.core.security import decode_access_token
from taskmatch.exceptions import AuthenticationError, InsufficientPermissionsError
from taskmatch.models.enums import UserRole
from taskmatch.models.principal import Principal

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal:
    """
    Resolve the authenticated caller from the bearer token.

    Returns:
        Principal: The caller's user id and role.

    Raises:
        AuthenticationError: If no bearer token was sent.
        InvalidTokenError: If the token is invalid or expired.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return decode_access_token(credentials.credentials)


def get_current_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """
    Require the caller to be an administrator.

    Raises:
        InsufficientPermissionsError: If the caller is not an admin.
    """
    if principal.role != UserRole.ADMIN:
        raise InsufficientPermissionsError("Admin privileges required")
    return principal

