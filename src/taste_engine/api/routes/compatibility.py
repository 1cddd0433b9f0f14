from typing import Annotated

from fastapi import APIRouter, Depends

from taste_engine.config import Settings
from taste_engine.dependencies.engine import get_scoring_weights, get_settings, normalize_or_422
from taste_engine.domain import UserId
from taste_engine.schemas.compatibility import (
    CandidateMatchesRequest,
    CandidateMatchesResponse,
    CompatibilityRequest,
    CompatibilityResponse,
    ScoringWeights,
)
from taste_engine.services.matching import compare_users, find_candidate_matches

router = APIRouter(tags=["compatibility"])


@router.post(
    "/compatibility",
    response_model=CompatibilityResponse,
    summary="Score Two Libraries",
    description=(
        "Normalizes both libraries, computes their MashScore and explains it with "
        "shared genres, similar favorites and a short insight."
    ),
    responses={422: {"description": "Malformed library record"}},
)
def score_compatibility(
    payload: CompatibilityRequest,
    weights: Annotated[ScoringWeights, Depends(get_scoring_weights)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> CompatibilityResponse:
    library_a = normalize_or_422(payload.library_a, payload.catalog)
    library_b = normalize_or_422(payload.library_b, payload.catalog)
    report = compare_users(
        library_a,
        library_b,
        weights=weights,
        favorite_threshold=app_settings.favorite_rating_threshold,
    )
    return CompatibilityResponse(
        compatibility=report.compatibility,
        taste_highlights=report.taste_highlights,
        insight=report.insight,
    )


@router.post(
    "/compatibility/candidates",
    response_model=CandidateMatchesResponse,
    summary="Find Compatible Users",
    description="Ranks every other user in the population by MashScore against the subject.",
    responses={422: {"description": "Malformed library record"}},
)
def find_candidates(
    payload: CandidateMatchesRequest,
    weights: Annotated[ScoringWeights, Depends(get_scoring_weights)],
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> CandidateMatchesResponse:
    subject = normalize_or_422(payload.subject.records, payload.catalog)
    population = [
        (UserId(member.user_id), normalize_or_422(member.records, payload.catalog))
        for member in payload.population
    ]
    candidates = find_candidate_matches(
        UserId(payload.subject.user_id),
        subject,
        population,
        weights=weights,
        require_shared_item=payload.require_shared_item,
        favorite_threshold=app_settings.favorite_rating_threshold,
    )
    return CandidateMatchesResponse(candidates=candidates)
