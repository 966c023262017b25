"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, Response, status

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from src.core.config import get_settings
from src.models.session import OnboardingSession
from src.schemas.admin import TokenPayload
from src.services.session_service import SessionService

SESSION_HEADER = "x-session-id"


def get_session_cookie_config() -> dict:
    """Get session cookie configuration from settings."""
    settings = get_settings()
    # SameSite=None requires Secure=True; use Lax for local development
    samesite = "none" if settings.session_cookie_secure else "lax"
    return {
        "key": settings.session_cookie_name,
        "max_age": settings.session_cookie_max_age,
        "httponly": True,
        "secure": settings.session_cookie_secure,
        "samesite": samesite,
        "path": "/",
    }


# Cookie utility functions


def get_session_id(request: Request) -> str | None:
    """Extract the session id from the X-Session-Id header or cookie.

    Checks header first (works when third-party cookies are blocked),
    then falls back to cookie.

    Args:
        request: FastAPI request object.

    Returns:
        str | None: The session id or None if not present.
    """
    header_value = request.headers.get(SESSION_HEADER)
    if header_value:
        return header_value.strip()

    config = get_session_cookie_config()
    return request.cookies.get(config["key"])


def set_session_cookie(response: Response, session_id: str) -> None:
    """Set session cookie on response.

    Args:
        response: FastAPI response object.
        session_id: The session id to set.
    """
    config = get_session_cookie_config()
    response.set_cookie(
        key=config["key"],
        value=session_id,
        max_age=config["max_age"],
        httponly=config["httponly"],
        secure=config["secure"],
        samesite=config["samesite"],
        path=config["path"],
    )


def clear_session_cookie(response: Response) -> None:
    """Clear session cookie from response.

    Args:
        response: FastAPI response object.
    """
    config = get_session_cookie_config()
    response.delete_cookie(
        key=config["key"],
        path=config["path"],
    )


async def get_current_session(request: Request) -> OnboardingSession:
    """Resolve the caller's onboarding session.

    Raises:
        HTTPException: 401 if no session id was sent, 404 if it is unknown.
    """
    session_id = get_session_id(request)
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session required",
        )

    session = await SessionService().get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


async def get_admin_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> TokenPayload:
    """Validate the admin token from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        TokenPayload: The admin token's claims.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_jwt(parts[1])
    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


# Type aliases for cleaner dependency injection
CurrentSession = Annotated[OnboardingSession, Depends(get_current_session)]
AdminUser = Annotated[TokenPayload, Depends(get_admin_user)]
