"""Routes for the free-standing per-session records.

Each kind maps to one table; every record belongs to exactly one session
and is written independently of the others.
"""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel, ValidationError

from src.api.deps import CurrentSession
from src.schemas.common import SuccessResponse
from src.schemas.records import (
    BusinessProcessCreate,
    CompanyValueCreate,
    CurrentSoftwareCreate,
    GoalCreate,
    ProductCreate,
    SupplierCreate,
    TeamMemberCreate,
)
from src.services.record_service import (
    GOALS_TABLE,
    PROCESSES_TABLE,
    PRODUCTS_TABLE,
    SOFTWARE_TABLE,
    SUPPLIERS_TABLE,
    TEAM_TABLE,
    VALUES_TABLE,
    get_record_service,
)

router = APIRouter(prefix="/records", tags=["records"])

RECORD_KINDS: dict[str, tuple[str, type[BaseModel]]] = {
    "processes": (PROCESSES_TABLE, BusinessProcessCreate),
    "goals": (GOALS_TABLE, GoalCreate),
    "values": (VALUES_TABLE, CompanyValueCreate),
    "products": (PRODUCTS_TABLE, ProductCreate),
    "suppliers": (SUPPLIERS_TABLE, SupplierCreate),
    "team": (TEAM_TABLE, TeamMemberCreate),
    "software": (SOFTWARE_TABLE, CurrentSoftwareCreate),
}


def _resolve_kind(kind: str) -> tuple[str, type[BaseModel]]:
    if kind not in RECORD_KINDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown record kind: {kind}",
        )
    return RECORD_KINDS[kind]


@router.post(
    "/{kind}",
    status_code=status.HTTP_201_CREATED,
    summary="Create a record",
    description="Kinds: processes, goals, values, products, suppliers, team, software.",
)
async def create_record(
    kind: str,
    session: CurrentSession,
    payload: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    table, schema = _resolve_kind(kind)
    try:
        data = schema.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        ) from e

    records = get_record_service()
    record_id = await records.create(table, {"session_id": session["id"], **data.model_dump(mode="json")})
    return await records.get(table, record_id)


@router.get(
    "/{kind}",
    summary="List the session's records of a kind",
)
async def list_records(kind: str, session: CurrentSession) -> list[dict[str, Any]]:
    table, _ = _resolve_kind(kind)
    return await get_record_service().list_by_session(table, session["id"])


@router.delete(
    "/{kind}/{record_id}",
    response_model=SuccessResponse,
    summary="Delete a record",
)
async def delete_record(kind: str, record_id: str, session: CurrentSession) -> SuccessResponse:
    table, _ = _resolve_kind(kind)
    records = get_record_service()
    record = await records.get(table, record_id)
    if record is None or record.get("session_id") != session["id"]:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Record not found",
        )
    await records.delete(table, record_id)
    return SuccessResponse()
