"""Company profile routes (1:1 with the session)."""

from fastapi import APIRouter, HTTPException, status

from src.api.deps import CurrentSession
from src.schemas.company import CompanyInfoResponse, CompanyInfoUpsert
from src.services.company_service import CompanyService

router = APIRouter(prefix="/company", tags=["company"])


@router.put(
    "",
    response_model=CompanyInfoResponse,
    summary="Create or replace the company profile",
)
async def upsert_company(data: CompanyInfoUpsert, session: CurrentSession) -> CompanyInfoResponse:
    company = await CompanyService().upsert_company(session["id"], data)
    return CompanyInfoResponse(**company)


@router.get(
    "",
    response_model=CompanyInfoResponse,
    summary="Get the company profile",
)
async def get_company(session: CurrentSession) -> CompanyInfoResponse:
    company = await CompanyService().get_company(session["id"])
    if company is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company profile not found",
        )
    return CompanyInfoResponse(**company)
