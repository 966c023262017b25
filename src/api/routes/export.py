"""Report export and final submission routes."""

from datetime import date

from fastapi import APIRouter, Response

from src.api.deps import CurrentSession
from src.api.middleware.error_handler import UpstreamServiceError, ValidationError
from src.schemas.submission import SubmissionResponse
from src.services.export_service import build_filename, content_disposition, render_markdown, render_pdf
from src.services.submission_service import SubmissionError, SubmissionInvalidError, SubmissionService
from src.services.wizard_service import WizardService

router = APIRouter(tags=["export"])


def _attachment_headers(filename: str) -> dict[str, str]:
    return {"Content-Disposition": content_disposition(filename)}


@router.get(
    "/export/markdown",
    response_class=Response,
    responses={200: {"content": {"text/markdown": {}}}},
    summary="Download the report as Markdown",
)
async def export_markdown(session: CurrentSession) -> Response:
    controller = await WizardService().load(session["id"])
    snapshot = controller.snapshot()
    today = date.today()
    return Response(
        content=render_markdown(snapshot, today),
        media_type="text/markdown; charset=utf-8",
        headers=_attachment_headers(build_filename(snapshot.company_name, today, "md")),
    )


@router.get(
    "/export/pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    summary="Download the report as PDF",
)
async def export_pdf(session: CurrentSession) -> Response:
    controller = await WizardService().load(session["id"])
    snapshot = controller.snapshot()
    today = date.today()
    return Response(
        content=render_pdf(snapshot, today),
        media_type="application/pdf",
        headers=_attachment_headers(build_filename(snapshot.company_name, today, "pdf")),
    )


@router.post(
    "/submission",
    response_model=SubmissionResponse,
    responses={
        422: {"description": "A wizard step does not validate"},
        502: {"description": "Delivery failed; the answers are kept for a retry"},
    },
    summary="Submit the questionnaire",
    description="Sends the report to the form relay. The saved answers are removed only after confirmed delivery.",
)
async def submit(session: CurrentSession) -> SubmissionResponse:
    try:
        attachment = await SubmissionService().submit(session["id"])
    except SubmissionInvalidError as e:
        raise ValidationError(
            "Bitte vervollständigen Sie alle Pflichtfelder",
            details=[m.as_error_detail() for m in e.messages],
        ) from e
    except SubmissionError as e:
        raise UpstreamServiceError(e.message, service="form_relay") from e

    return SubmissionResponse(filename=attachment.filename)
