"""Static catalog routes."""

from fastapi import APIRouter

from src.services.catalogs import catalogs_payload

router = APIRouter(prefix="/catalogs", tags=["catalogs"])


@router.get(
    "",
    summary="All catalogs",
    description="CRM phases, project types, modules, automation templates, integrations, roles and document types.",
)
async def get_catalogs() -> dict:
    return catalogs_payload()
