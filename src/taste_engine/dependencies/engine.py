from typing import Annotated

from fastapi import Depends, HTTPException

from taste_engine.config import Settings, settings
from taste_engine.errors import TasteEngineError
from taste_engine.schemas.compatibility import ScoringWeights
from taste_engine.schemas.library import LibraryEntry, MediaCatalog, UserMediaRecord
from taste_engine.schemas.mood import MoodCatalog
from taste_engine.services.moods import load_mood_catalog
from taste_engine.services.normalizer import normalize_library


def get_settings() -> Settings:
    return settings


def get_scoring_weights(
    app_settings: Annotated[Settings, Depends(get_settings)],
) -> ScoringWeights:
    return app_settings.scoring_weights()


def get_mood_catalog() -> MoodCatalog:
    return load_mood_catalog()


def normalize_or_422(
    records: list[UserMediaRecord], catalog: MediaCatalog
) -> list[LibraryEntry]:
    """Normalizes request records, reporting malformed input as a 422."""
    try:
        return normalize_library(records, catalog)
    except TasteEngineError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
