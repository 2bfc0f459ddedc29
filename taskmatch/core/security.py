from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import PyJWTError
from pydantic import ValidationError as SchemaValidationError

from taskmatch.core.config import get_settings
from taskmatch.exceptions import AppException, InvalidTokenError
from taskmatch.models.principal import Principal, TokenData


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token containing the provided payload.

    Token issuance belongs to the identity provider; this is used by seeding
    scripts and tests to mint tokens the API accepts.

    Parameters:
        data (dict): Claims to include in the token payload, typically `sub` (user id as string) and `role`.
        expires_delta (timedelta | None): Optional time until expiration. If `None`, the expiration is set using ACCESS_TOKEN_EXPIRE_MINUTES from application settings.

    Returns:
        str: Encoded JWT access token string.

    Raises:
        AppException: If the token cannot be generated.
    """
    settings = get_settings()
    expires_delta = (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    try:
        return jwt.encode(
            to_encode,
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
    except PyJWTError as e:
        raise AppException("Could not generate authentication token.") from e


def create_principal_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    return create_access_token(
        {"sub": str(principal.id_user), "role": principal.role.value}, expires_delta
    )


def decode_access_token(token: str) -> Principal:
    """
    Decode a bearer token into the calling principal.

    Returns:
        Principal: The user id from `sub` and the role claim.

    Raises:
        InvalidTokenError: If the signature, expiry or claims are invalid.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
        )
        token_data = TokenData.model_validate(payload)
    except (PyJWTError, SchemaValidationError):
        raise InvalidTokenError()

    if token_data.sub is None or token_data.role is None or not token_data.sub.isdigit():
        raise InvalidTokenError()
    return Principal(id_user=int(token_data.sub), role=token_data.role)
