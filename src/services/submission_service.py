"""Final submission: render the report and hand it to the form relay."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx

from src.core.config import get_settings
from src.core.store import KeyValueStore
from src.schemas.snapshot import OnboardingSnapshot
from src.schemas.wizard import ValidationMessage
from src.services.company_service import CompanyService
from src.services.export_service import build_filename, render_markdown, render_pdf
from src.services.record_service import (
    GOALS_TABLE,
    PROCESSES_TABLE,
    VALUES_TABLE,
    RecordService,
    get_record_service,
)
from src.services.session_service import SessionService
from src.services.wizard_service import WizardService

logger = logging.getLogger(__name__)

SUBMISSION_FAILED_MESSAGE = "Fehler beim Absenden. Bitte versuchen Sie es erneut."


class TransportError(Exception):
    """The form relay did not confirm delivery."""


class SubmissionError(Exception):
    """Submission failed; the snapshot is kept so the user can retry."""

    def __init__(self, message: str = SUBMISSION_FAILED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


class SubmissionInvalidError(Exception):
    """The snapshot does not pass step validation."""

    def __init__(self, messages: list[ValidationMessage]) -> None:
        self.messages = messages
        super().__init__("; ".join(m.message for m in messages))


@dataclass
class Attachment:
    filename: str
    content: bytes
    mime_type: str


class FormRelayTransport:
    """Multipart POST to a form relay endpoint.

    The relay gets plain text fields plus one file. There is no retry
    here; retrying is up to the user.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.url = url if url is not None else settings.form_relay_url
        self.timeout = timeout if timeout is not None else settings.form_relay_timeout_seconds
        self.transport = transport

    async def send(self, fields: dict[str, str], attachment: Attachment) -> None:
        """Deliver one submission.

        Raises:
            TransportError: If no relay is configured, the request fails
                or the relay answers with a non-2xx status.
        """
        if not self.url:
            raise TransportError("No form relay URL configured")

        files = {"attachment": (attachment.filename, attachment.content, attachment.mime_type)}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    data=fields,
                    files=files,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            raise TransportError(f"Form relay request failed: {e}") from e

        if response.is_error:
            raise TransportError(f"Form relay answered {response.status_code}")
        logger.info("Form relay accepted submission (%d)", response.status_code)


def _json_field(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_fields(snapshot: OnboardingSnapshot) -> dict[str, str]:
    """Flat text fields sent alongside the attachment."""
    data = snapshot.model_dump(mode="json", by_alias=True)
    company = snapshot.company_name.strip() or "Unbekannt"

    fields = {
        "_subject": f"Neues Onboarding: {company}",
        "_template": "table",
        "_captcha": "false",
        "Client Name": snapshot.client_name,
        "Client Email": snapshot.client_email,
        "Client Phone": snapshot.client_phone,
        "Company Name": snapshot.company_name,
        "Industry": snapshot.industry,
        "Founded Year": snapshot.founded_year,
        "Number of Employees": snapshot.number_of_employees,
        "Location": snapshot.company_location,
        "Website": snapshot.website,
        "Description": snapshot.description,
        "Selected Processes": _json_field(data["selectedProcesses"]),
        "Process Analyses": _json_field(data["processAnalyses"]),
        "Project Types": _json_field(
            {"selected": data["selectedProjectTypes"], "details": data["projectTypeData"]}
        ),
        "Goals": _json_field(data["goals"]),
        "Company Values": _json_field(data["values"]),
        "Automations": _json_field([a for a in data["automations"] if a.get("enabled")]),
        "Roles & Permissions": _json_field(data["roles"]),
        "Integrations": _json_field([i for i in data["integrations"] if i.get("enabled")]),
        "Go-Live Plan": _json_field(data["goLivePlan"]),
        "Additional Notes": snapshot.additional_notes,
    }
    comments = sorted(
        snapshot.step_comments.items(),
        key=lambda item: int(item[0]) if item[0].isdigit() else 99,
    )
    for step, comment in comments:
        if comment.strip():
            fields[f"Step {step} Comments"] = comment
    return fields


async def archive_snapshot(records: RecordService, session_id: str, snapshot: OnboardingSnapshot) -> None:
    """Write the submitted answers into the per-session tables.

    The snapshot is removed after a submission; these rows are what the
    admin dashboard reads afterwards.
    """
    for phase, analysis in zip(snapshot.selected_processes, snapshot.process_analyses):
        await records.create(
            PROCESSES_TABLE,
            {
                "session_id": session_id,
                "process_name": phase.name,
                "category": phase.id,
                "description": phase.description or None,
                "current_state": analysis.current_state,
                "pain_points": analysis.pain_points or None,
                "desired_state": analysis.desired_state or None,
                "priority": analysis.priority,
            },
        )
    for goal in snapshot.goals:
        await records.create(
            GOALS_TABLE,
            {
                "session_id": session_id,
                "goal_type": goal.goal_type,
                "title": goal.title,
                "description": goal.description or None,
                "target_date": goal.target_date,
                "priority": goal.priority,
            },
        )
    for value in snapshot.values:
        await records.create(
            VALUES_TABLE,
            {
                "session_id": session_id,
                "value_name": value.value_name,
                "description": value.description or None,
                "examples": value.examples or None,
                "importance": value.importance,
            },
        )
    await CompanyService(records).sync_from_snapshot(session_id, snapshot)


def build_attachment(snapshot: OnboardingSnapshot, day: date, attachment_format: str) -> Attachment:
    if attachment_format == "pdf":
        return Attachment(
            filename=build_filename(snapshot.company_name, day, "pdf"),
            content=render_pdf(snapshot, day),
            mime_type="application/pdf",
        )
    return Attachment(
        filename=build_filename(snapshot.company_name, day, "md"),
        content=render_markdown(snapshot, day).encode("utf-8"),
        mime_type="text/markdown",
    )


class SubmissionService:
    """Sends a finished questionnaire and closes the session."""

    def __init__(
        self,
        transport: FormRelayTransport | None = None,
        store: KeyValueStore | None = None,
        sessions: SessionService | None = None,
        records: RecordService | None = None,
    ) -> None:
        """Initialize submission service.

        Args:
            transport: Optional form relay transport for testing.
            store: Optional keyed store for testing.
            sessions: Optional session service for testing.
            records: Optional record service for testing.
        """
        self.transport = transport or FormRelayTransport()
        self.wizard = WizardService(store)
        self.records = records or get_record_service()
        self.sessions = sessions or SessionService(self.records)

    async def submit(self, session_id: str, today: date | None = None) -> Attachment:
        """Validate, render and deliver the session's snapshot.

        The persisted snapshot is removed only after the relay confirmed
        delivery.

        Args:
            session_id: Session to submit.
            today: Report date, defaults to today.

        Returns:
            Attachment: The delivered report.

        Raises:
            SubmissionInvalidError: If any step fails validation.
            SubmissionError: If delivery failed.
        """
        controller = await self.wizard.load(session_id)
        messages = controller.validate_all()
        if messages:
            raise SubmissionInvalidError(messages)

        snapshot = controller.snapshot()
        day = today or date.today()
        attachment = build_attachment(snapshot, day, get_settings().submission_attachment_format)

        try:
            await self.transport.send(build_fields(snapshot), attachment)
        except TransportError as e:
            logger.warning("Submission for session %s not delivered: %s", session_id, e)
            raise SubmissionError() from e

        controller.clear()
        # Delivery already happened; bookkeeping failures are only logged
        try:
            await archive_snapshot(self.records, session_id, snapshot)
            await self.sessions.mark_completed(session_id)
        except Exception as e:
            logger.warning("Could not close session %s after submission: %s", session_id, e)

        logger.info("Submitted onboarding for session %s (%s)", session_id, attachment.filename)
        return attachment
