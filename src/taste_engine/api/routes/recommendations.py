from typing import Annotated

from fastapi import APIRouter, Depends

from taste_engine.config import Settings
from taste_engine.dependencies.engine import get_mood_catalog, get_settings, normalize_or_422
from taste_engine.schemas.mood import MoodCatalog
from taste_engine.schemas.recommendation import (
    MoodRecommendationRequest,
    RecommendationRequest,
    RecommendationsResponse,
)
from taste_engine.services.moods import genres_for_moods
from taste_engine.services.recommendation import recommend, recommend_for_mood

router = APIRouter(tags=["recommendations"])


@router.post(
    "/recommendations",
    response_model=RecommendationsResponse,
    summary="Recommend Across Media Types",
    description=(
        "Scores candidate pool items against the user's favorite genres. Items already "
        "in the library are never returned."
    ),
    responses={422: {"description": "Malformed library record"}},
)
def read_recommendations(
    payload: RecommendationRequest,
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> RecommendationsResponse:
    library = normalize_or_422(payload.records, payload.catalog)
    recommendations = recommend(
        library,
        payload.candidate_pool,
        target_genres=payload.target_genres,
        media_type=payload.media_type,
        cross_media_only=payload.cross_media_only,
        limit=payload.limit,
        favorite_threshold=app_settings.favorite_rating_threshold,
    )
    return RecommendationsResponse(recommendations=recommendations)


@router.post(
    "/recommendations/mood",
    response_model=RecommendationsResponse,
    summary="Recommend For A Mood",
    description="Scores candidates against the genres of the selected moods.",
    responses={422: {"description": "Malformed library record"}},
)
def read_mood_recommendations(
    payload: MoodRecommendationRequest,
    app_settings: Annotated[Settings, Depends(get_settings)],
    mood_catalog: Annotated[MoodCatalog, Depends(get_mood_catalog)],
) -> RecommendationsResponse:
    library = normalize_or_422(payload.records, payload.catalog)
    target_genres = payload.target_genres
    if target_genres is None:
        target_genres = genres_for_moods(payload.moods, mood_catalog)
    recommendations = recommend_for_mood(
        library,
        payload.candidate_pool,
        moods=payload.moods,
        target_genres=target_genres,
        media_type=payload.media_type,
        limit=payload.limit,
        bonus_per_genre=app_settings.mood_bonus_per_genre,
    )
    return RecommendationsResponse(recommendations=recommendations)
