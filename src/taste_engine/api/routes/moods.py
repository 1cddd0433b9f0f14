from typing import Annotated

from fastapi import APIRouter, Depends

from taste_engine.dependencies.engine import get_mood_catalog
from taste_engine.schemas.mood import MoodCatalog

router = APIRouter(tags=["moods"])


@router.get("/moods", response_model=MoodCatalog, summary="List Moods")
def list_moods(catalog: Annotated[MoodCatalog, Depends(get_mood_catalog)]) -> MoodCatalog:
    return catalog
