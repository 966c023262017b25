"""Wizard API routes: navigation, field edits and the process capture sub-flow."""

import logging

from fastapi import APIRouter, HTTPException, status

from src.api.deps import CurrentSession
from src.schemas.session import SessionUpdate
from src.schemas.snapshot import SnapshotUpdate
from src.schemas.wizard import (
    CaptureDraft,
    ConfirmSelectionRequest,
    CustomPhaseCreate,
    CustomProjectTypeCreate,
    GoToStepRequest,
    ProcessCaptureResponse,
    StepValidationResponse,
    ValidationMessage,
    WizardResponse,
)
from src.services.company_service import CompanyService
from src.services.process_capture import ProcessCaptureStateError
from src.services.session_service import SessionService
from src.services.wizard_service import WizardController, WizardService, step_info

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wizard", tags=["wizard"])

COMPANY_STEP = 2


def _wizard_response(controller: WizardController, messages: list[ValidationMessage] | None = None) -> WizardResponse:
    return WizardResponse.build(
        controller.snapshot(),
        step_info(controller.current_step),
        controller.total_steps,
        messages,
    )


def _capture_response(
    controller: WizardController,
    messages: list[ValidationMessage] | None = None,
) -> ProcessCaptureResponse:
    snapshot = controller.snapshot()
    return ProcessCaptureResponse(
        ok=not messages,
        state=snapshot.process_capture,
        focus=controller.capture.focus(),
        messages=messages or [],
        current_step=snapshot.current_step,
        custom_phases=snapshot.custom_phases,
        custom_project_types=snapshot.custom_project_types,
        selected_processes=snapshot.selected_processes,
        selected_project_types=snapshot.selected_project_types,
    )


def _state_conflict(e: ProcessCaptureStateError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


async def _track_step(session_id: str, previous_step: int, controller: WizardController) -> None:
    """Mirror step progress into the session record.

    Record-service failures are logged only; the snapshot is already saved.
    """
    if controller.current_step == previous_step:
        return
    try:
        if previous_step == COMPANY_STEP and controller.current_step > COMPANY_STEP:
            await CompanyService().sync_from_snapshot(session_id, controller.snapshot())
        await SessionService().update_session(session_id, SessionUpdate(current_step=controller.current_step))
    except Exception as e:
        logger.warning("Could not record progress of session %s: %s", session_id, e)


@router.get(
    "",
    response_model=WizardResponse,
    summary="Get wizard state",
    description="Returns the current step and the full saved snapshot.",
)
async def get_wizard(session: CurrentSession) -> WizardResponse:
    controller = await WizardService().load(session["id"])
    return _wizard_response(controller)


@router.patch(
    "",
    response_model=WizardResponse,
    summary="Edit snapshot fields",
    description="Applies field edits for the open step and saves the snapshot. Does not validate.",
)
async def update_wizard(data: SnapshotUpdate, session: CurrentSession) -> WizardResponse:
    controller = await WizardService().load(session["id"])
    changes = data.changes()
    if changes:
        controller.update(changes)
    return _wizard_response(controller)


@router.post(
    "/advance",
    response_model=WizardResponse,
    summary="Go to the next step",
    description="Moves forward if the current step validates; otherwise returns the validation messages.",
)
async def advance(session: CurrentSession) -> WizardResponse:
    """Move to the next step.

    Validation problems do not raise: the response has ``ok=false`` and
    the messages, and the step stays unchanged.
    """
    controller = await WizardService().load(session["id"])
    previous_step = controller.current_step
    messages = controller.advance()
    await _track_step(session["id"], previous_step, controller)
    return _wizard_response(controller, messages)


@router.post(
    "/retreat",
    response_model=WizardResponse,
    summary="Go to the previous step",
    description="Moves back one step. Never blocked by validation.",
)
async def retreat(session: CurrentSession) -> WizardResponse:
    controller = await WizardService().load(session["id"])
    previous_step = controller.current_step
    controller.retreat()
    await _track_step(session["id"], previous_step, controller)
    return _wizard_response(controller)


@router.post(
    "/goto",
    response_model=WizardResponse,
    summary="Jump to a step",
    description="Backward jumps always succeed; forward jumps need every skipped step to validate.",
)
async def go_to_step(data: GoToStepRequest, session: CurrentSession) -> WizardResponse:
    controller = await WizardService().load(session["id"])
    previous_step = controller.current_step
    messages = controller.go_to_step(data.step)
    await _track_step(session["id"], previous_step, controller)
    return _wizard_response(controller, messages)


@router.get(
    "/validate/{step}",
    response_model=StepValidationResponse,
    summary="Validate a step",
    description="Returns the messages that would block leaving the given step.",
)
async def validate_step(step: int, session: CurrentSession) -> StepValidationResponse:
    controller = await WizardService().load(session["id"])
    messages = controller.validate_step(step)
    return StepValidationResponse(step=step, valid=not messages, messages=messages)


# Process capture


@router.get(
    "/process-capture",
    response_model=ProcessCaptureResponse,
    summary="Get process capture state",
)
async def get_process_capture(session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    return _capture_response(controller)


@router.post(
    "/process-capture/custom-phases",
    response_model=ProcessCaptureResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a custom CRM phase",
)
async def add_custom_phase(data: CustomPhaseCreate, session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        controller.open_capture("add_custom_phase").add_custom_phase(data.name, data.description, data.benefit)
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    controller.save()
    return _capture_response(controller)


@router.post(
    "/process-capture/custom-project-types",
    response_model=ProcessCaptureResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a custom project type",
)
async def add_custom_project_type(
    data: CustomProjectTypeCreate,
    session: CurrentSession,
) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        capture = controller.open_capture("add_custom_project_type")
        capture.add_custom_project_type(data.name, data.description, data.icon)
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    controller.save()
    return _capture_response(controller)


@router.post(
    "/process-capture/confirm",
    response_model=ProcessCaptureResponse,
    summary="Confirm the phase and project type selection",
    description="Starts the per-item analysis. At least one phase or project type is required.",
)
async def confirm_selection(data: ConfirmSelectionRequest, session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        messages = controller.open_capture("confirm").confirm(data.phase_ids, data.project_type_ids)
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    if not messages:
        controller.save()
    return _capture_response(controller, messages)


@router.put(
    "/process-capture/draft",
    response_model=ProcessCaptureResponse,
    summary="Save answers for the item in focus",
)
async def save_draft(data: CaptureDraft, session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        controller.open_capture("save_draft").save_draft(data)
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    controller.save()
    return _capture_response(controller)


@router.post(
    "/process-capture/next",
    response_model=ProcessCaptureResponse,
    summary="Save answers and move to the next item",
    description="Phase pages need a current-state text. Leaving the last page finishes the capture.",
)
async def capture_next(session: CurrentSession, data: CaptureDraft | None = None) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    previous_step = controller.current_step
    try:
        outcome = controller.capture_next(data)
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    await _track_step(session["id"], previous_step, controller)
    return _capture_response(controller, outcome.messages)


@router.post(
    "/process-capture/previous",
    response_model=ProcessCaptureResponse,
    summary="Move to the previous item",
)
async def capture_previous(session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        controller.open_capture("previous").previous()
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    controller.save()
    return _capture_response(controller)


@router.post(
    "/process-capture/reset",
    response_model=ProcessCaptureResponse,
    summary="Return to the selection screen",
    description="Selection and saved answers are kept.",
)
async def capture_reset(session: CurrentSession) -> ProcessCaptureResponse:
    controller = await WizardService().load(session["id"])
    try:
        controller.open_capture("reset").reset()
    except ProcessCaptureStateError as e:
        raise _state_conflict(e) from e
    controller.save()
    return _capture_response(controller)
