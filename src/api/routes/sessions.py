"""Session API routes for onboarding session management."""

from fastapi import APIRouter, Response, status

from src.api.deps import CurrentSession, clear_session_cookie, set_session_cookie
from src.schemas.common import SuccessResponse
from src.schemas.session import SessionCreate, SessionResponse
from src.services.session_service import SessionService
from src.services.wizard_service import WizardService

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start an onboarding session",
    description="Creates a session from the contact details of wizard step 1 and sets the session cookie.",
)
async def create_session(data: SessionCreate, response: Response) -> SessionResponse:
    """Start a new onboarding run.

    The wizard snapshot is seeded with the contact details. The session
    id is returned in the body, the cookie and the ``X-Session-Id``
    header (for clients that block third-party cookies).

    Args:
        data: Contact details.
        response: FastAPI response object for setting cookie.

    Returns:
        SessionResponse: The created session data.
    """
    session = await SessionService().create_session(data)

    await WizardService().start(
        session["id"],
        client_name=data.client_name.strip(),
        client_email=data.client_email or "",
        client_phone=data.client_phone or "",
    )

    set_session_cookie(response, session["id"])
    response.headers["x-session-id"] = session["id"]

    return SessionResponse(**session)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Get current session",
    description="Returns the session identified by the X-Session-Id header or cookie.",
)
async def get_my_session(session: CurrentSession) -> SessionResponse:
    return SessionResponse(**session)


@router.delete(
    "/me/cookie",
    response_model=SuccessResponse,
    summary="Forget the session on this device",
    description="Clears the session cookie. The session itself is kept.",
)
async def forget_session(response: Response) -> SuccessResponse:
    clear_session_cookie(response)
    return SuccessResponse()
