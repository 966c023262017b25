"""Company profile business logic service."""

import logging

from pydantic import ValidationError

from src.models.company import CompanyInfo
from src.schemas.company import CompanyInfoUpsert
from src.schemas.snapshot import OnboardingSnapshot
from src.services.record_service import COMPANY_TABLE, RecordService, get_record_service

logger = logging.getLogger(__name__)


def _to_int(value: str) -> int | None:
    value = value.strip()
    return int(value) if value.isdigit() else None


class CompanyService:
    """Service for the 1:1 company profile of a session."""

    def __init__(self, records: RecordService | None = None) -> None:
        """Initialize company service.

        Args:
            records: Optional record service for testing.
        """
        self.records = records or get_record_service()

    async def upsert_company(self, session_id: str, data: CompanyInfoUpsert) -> CompanyInfo:
        """Create or replace the session's company profile.

        Args:
            session_id: Owning session.
            data: Profile fields.

        Returns:
            CompanyInfo: The stored profile row.
        """
        return await self.records.upsert_by_session(
            COMPANY_TABLE,
            session_id,
            data.model_dump(),
        )

    async def get_company(self, session_id: str) -> CompanyInfo | None:
        """Get the session's company profile.

        Args:
            session_id: Owning session.

        Returns:
            CompanyInfo | None: The profile row or None if not captured yet.
        """
        rows = await self.records.list_by_session(COMPANY_TABLE, session_id)
        return rows[0] if rows else None

    async def sync_from_snapshot(self, session_id: str, snapshot: OnboardingSnapshot) -> CompanyInfo | None:
        """Mirror the wizard's company fields into the profile record.

        Numeric fields that are not plain integers are stored as empty.
        """
        if not snapshot.company_name.strip():
            return None
        try:
            data = CompanyInfoUpsert(
                company_name=snapshot.company_name.strip(),
                industry=snapshot.industry or None,
                founded_year=_to_int(snapshot.founded_year),
                number_of_employees=_to_int(snapshot.number_of_employees),
                location=snapshot.company_location or None,
                website=snapshot.website or None,
                description=snapshot.description or None,
            )
        except ValidationError as e:
            logger.warning("Company fields of session %s not mirrored: %s", session_id, e.errors(include_url=False))
            return None
        return await self.upsert_company(session_id, data)
