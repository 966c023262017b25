"""Odoo module recommendation routes."""

from fastapi import APIRouter

from src.api.deps import CurrentSession
from src.schemas.recommendation import RecommendationRequest, RecommendationResponse
from src.services.recommendation_service import build_recommendations
from src.services.wizard_service import WizardService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get(
    "",
    response_model=RecommendationResponse,
    summary="Recommendations for the session",
    description="Uses the phases and project types selected in the session's process capture.",
)
async def get_session_recommendations(session: CurrentSession) -> RecommendationResponse:
    controller = await WizardService().load(session["id"])
    snapshot = controller.snapshot()
    return build_recommendations(snapshot.phase_ids(), snapshot.selected_project_types)


@router.post(
    "",
    response_model=RecommendationResponse,
    summary="Recommendations for an explicit selection",
)
async def recommend(data: RecommendationRequest) -> RecommendationResponse:
    return build_recommendations(data.phase_ids, data.project_type_ids)
