"""Admin dashboard routes.

The login is a placeholder credential check; see AdminService.
"""

from datetime import date

from fastapi import APIRouter, HTTPException, Response, status

from src.api.deps import AdminUser
from src.schemas.admin import AdminLoginRequest, AdminSessionDetail, AdminTokenResponse
from src.schemas.session import SessionResponse
from src.services.admin_service import AdminService
from src.services.export_service import build_filename, content_disposition, render_markdown

router = APIRouter(prefix="/admin", tags=["admin"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Session not found",
    )


@router.post(
    "/login",
    response_model=AdminTokenResponse,
    responses={401: {"description": "Invalid credentials"}},
    summary="Admin login",
)
async def login(data: AdminLoginRequest) -> AdminTokenResponse:
    return AdminService().login(data.username, data.password)


@router.get(
    "/sessions",
    response_model=list[SessionResponse],
    summary="All sessions, newest first",
)
async def list_sessions(admin: AdminUser) -> list[SessionResponse]:
    sessions = await AdminService().sessions.list_sessions()
    return [SessionResponse(**s) for s in sessions]


@router.get(
    "/sessions/{session_id}",
    response_model=AdminSessionDetail,
    summary="Everything captured for a session",
)
async def get_session_detail(session_id: str, admin: AdminUser) -> AdminSessionDetail:
    detail = await AdminService().session_detail(session_id)
    if detail is None:
        raise _not_found()
    return AdminSessionDetail(**detail)


@router.get(
    "/sessions/{session_id}/export/markdown",
    response_class=Response,
    responses={200: {"content": {"text/markdown": {}}}},
    summary="Download a session's report as Markdown",
    description=(
        "Uses the saved snapshot until submission. Afterwards the report is rebuilt from the archived "
        "records and lists contact, company, processes, goals and values only."
    ),
)
async def export_session_markdown(session_id: str, admin: AdminUser) -> Response:
    snapshot = await AdminService().report_snapshot(session_id)
    if snapshot is None:
        raise _not_found()
    today = date.today()
    return Response(
        content=render_markdown(snapshot, today),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": content_disposition(build_filename(snapshot.company_name, today, "md"))},
    )
