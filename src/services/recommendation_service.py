"""ERP module recommendations derived from the process selection.

A pure mapping: the same selection always yields the same ordered list.
"""

from collections.abc import Iterable

from src.schemas.recommendation import (
    ModuleRecommendation,
    RecommendationResponse,
    RecommendationSummary,
)
from src.services.catalogs import MODULE_CATALOG, PRIORITY_ORDER


def recommend_modules(
    phase_ids: Iterable[str],
    project_type_ids: Iterable[str] = (),
) -> list[ModuleRecommendation]:
    """Annotate every catalog module and order by priority tier.

    A module is recommended when its catalog entry says so by default or
    when any selected phase or project type appears in its
    ``required_for`` list. ``sorted`` is stable, so modules within a tier
    keep catalog order.

    Args:
        phase_ids: Selected phase ids (catalog or custom).
        project_type_ids: Selected project type ids.

    Returns:
        list[ModuleRecommendation]: All modules, essential first.
    """
    selected = set(phase_ids) | set(project_type_ids)

    modules = [
        ModuleRecommendation(
            id=entry["id"],
            name=entry["name"],
            description=entry["description"],
            benefits=list(entry["benefits"]),
            required_for=list(entry["required_for"]),
            recommended=entry["recommended"] or bool(selected.intersection(entry["required_for"])),
            priority=entry["priority"],
        )
        for entry in MODULE_CATALOG
    ]
    return sorted(modules, key=lambda module: PRIORITY_ORDER[module.priority])


def summarize(modules: list[ModuleRecommendation]) -> RecommendationSummary:
    """Count modules per priority tier."""
    summary = RecommendationSummary()
    for module in modules:
        setattr(summary, module.priority, getattr(summary, module.priority) + 1)
    return summary


def build_recommendations(
    phase_ids: Iterable[str],
    project_type_ids: Iterable[str] = (),
) -> RecommendationResponse:
    """Recommendations plus tier counts, as returned by the API."""
    modules = recommend_modules(phase_ids, project_type_ids)
    return RecommendationResponse(modules=modules, summary=summarize(modules))
