import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import jwt

from taskmatch.core.config import get_settings
from taskmatch.core.security import (
    create_access_token,
    create_principal_token,
    decode_access_token,
)
from taskmatch.exceptions import AppException, InvalidTokenError
from taskmatch.models.enums import UserRole
from taskmatch.models.principal import Principal


def _raw_token(claims: dict) -> str:
    settings = get_settings()
    return jwt.encode(
        claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
    )


class TestCreateAccessToken:
    """Test token creation."""

    def test_contains_claims_and_expiry(self):
        token = create_access_token({"sub": "12", "role": "ngo"})

        settings = get_settings()
        payload = jwt.decode(
            token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM]
        )
        assert payload["sub"] == "12"
        assert payload["role"] == "ngo"
        assert "exp" in payload

    def test_custom_expiry(self):
        before = datetime.now(timezone.utc)
        token = create_access_token({"sub": "1"}, expires_delta=timedelta(minutes=5))

        payload = jwt.decode(token, options={"verify_signature": False})
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert timedelta(minutes=4) < expires - before <= timedelta(minutes=5, seconds=1)

    def test_does_not_mutate_input(self):
        data = {"sub": "1", "role": "admin"}
        create_access_token(data)
        assert data == {"sub": "1", "role": "admin"}

    @patch("taskmatch.core.security.jwt.encode")
    def test_encoding_failure(self, mock_encode):
        mock_encode.side_effect = jwt.PyJWTError("boom")
        with pytest.raises(AppException):
            create_access_token({"sub": "1"})


class TestDecodeAccessToken:
    """Test token verification into a principal."""

    @pytest.mark.parametrize("role", list(UserRole))
    def test_round_trip(self, role):
        principal = Principal(id_user=42, role=role)

        decoded = decode_access_token(create_principal_token(principal))

        assert decoded == principal

    def test_expired_token(self):
        token = create_principal_token(
            Principal(id_user=1, role=UserRole.VOLUNTEER),
            expires_delta=timedelta(seconds=-1),
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sub": "1", "role": "admin"}, "another-secret-key-entirely", algorithm="HS256"
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.token")

    @pytest.mark.parametrize(
        "claims",
        [
            {"role": "volunteer"},
            {"sub": "7"},
            {"sub": "seven", "role": "volunteer"},
            {"sub": "7", "role": "superuser"},
        ],
    )
    def test_invalid_claims(self, claims):
        with pytest.raises(InvalidTokenError):
            decode_access_token(_raw_token(claims))

    def test_error_code(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            decode_access_token("not.a.token")
        assert exc_info.value.code == "invalid_token"
