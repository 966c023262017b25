"""Unit tests for admin token handling."""

import time

import jwt
import pytest

from src.api.middleware.auth import ALGORITHM, AuthError, AuthErrorCode, decode_jwt, encode_jwt


class TestEncodeDecode:
    """Tests for encode_jwt and decode_jwt."""

    def test_round_trip(self) -> None:
        token = encode_jwt("PISTA", ttl_seconds=60, now=int(time.time()))

        payload = decode_jwt(token)

        assert payload.sub == "PISTA"
        assert payload.role == "admin"
        assert payload.exp - payload.iat == 60

    def test_expired_token(self) -> None:
        token = encode_jwt("PISTA", ttl_seconds=60, now=int(time.time()) - 3600)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.TOKEN_EXPIRED

    def test_wrong_secret(self) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "PISTA", "role": "admin", "iat": now, "exp": now + 60},
            "another-secret",
            algorithm=ALGORITHM,
        )

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.INVALID_SIGNATURE

    def test_missing_claim(self, test_settings) -> None:
        token = jwt.encode({"sub": "PISTA", "role": "admin"}, test_settings.admin_token_secret, algorithm=ALGORITHM)

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN

    def test_non_admin_role(self, test_settings) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "max", "role": "client", "iat": now, "exp": now + 60},
            test_settings.admin_token_secret,
            algorithm=ALGORITHM,
        )

        with pytest.raises(AuthError) as exc_info:
            decode_jwt(token)

        assert exc_info.value.code == AuthErrorCode.UNAUTHORIZED

    def test_garbage(self) -> None:
        with pytest.raises(AuthError) as exc_info:
            decode_jwt("not-a-token")

        assert exc_info.value.code == AuthErrorCode.INVALID_TOKEN
