"""Admin token issuing and validation (HS256)."""

import time
from enum import Enum
from typing import Any

import jwt

from src.core.config import get_settings
from src.schemas.admin import TokenPayload

ALGORITHM = "HS256"


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Authentication error with specific error code."""

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            code: Specific error code for programmatic handling.
        """
        self.message = message
        self.code = code
        super().__init__(message)


def encode_jwt(subject: str, ttl_seconds: int | None = None, now: int | None = None) -> str:
    """Issue an admin token for ``subject``."""
    settings = get_settings()
    issued_at = now if now is not None else int(time.time())
    ttl = ttl_seconds if ttl_seconds is not None else settings.admin_token_ttl_seconds
    payload = {"sub": subject, "role": "admin", "iat": issued_at, "exp": issued_at + ttl}
    return jwt.encode(payload, settings.admin_token_secret, algorithm=ALGORITHM)


def decode_jwt(token: str) -> TokenPayload:
    """Decode and validate an admin token.

    Args:
        token: The JWT token string to decode.

    Returns:
        TokenPayload: Validated token payload.

    Raises:
        AuthError: If token is invalid, expired, or has wrong signature.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            get_settings().admin_token_secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Token has expired", AuthErrorCode.TOKEN_EXPIRED) from e
    except jwt.InvalidSignatureError as e:
        raise AuthError("Invalid token signature", AuthErrorCode.INVALID_SIGNATURE) from e
    except jwt.MissingRequiredClaimError as e:
        raise AuthError(f"Token missing required claim: {e}", AuthErrorCode.INVALID_TOKEN) from e
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid token format: {e}", AuthErrorCode.INVALID_TOKEN) from e

    if payload.get("role") != "admin":
        raise AuthError("Token is not an admin token", AuthErrorCode.UNAUTHORIZED)
    return TokenPayload(**payload)
