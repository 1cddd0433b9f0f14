import logging
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

import yaml

from taste_engine.schemas.mood import Mood, MoodCatalog

logger = logging.getLogger(__name__)

DEFAULT_MOODS_PATH = Path(__file__).resolve().parent.parent / "data" / "moods.yaml"


def load_mood_catalog_from_yaml(path: str | Path) -> MoodCatalog:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return MoodCatalog(**(data or {}))


@lru_cache(maxsize=1)
def load_mood_catalog() -> MoodCatalog:
    catalog = load_mood_catalog_from_yaml(DEFAULT_MOODS_PATH)
    logger.debug("mood_catalog_loaded", extra={"moods": len(catalog.moods)})
    return catalog


def get_mood(name: str, catalog: MoodCatalog | None = None) -> Mood | None:
    catalog = catalog or load_mood_catalog()
    normalized = name.strip().lower()
    return next((mood for mood in catalog.moods if mood.name == normalized), None)


def genres_for_moods(names: Iterable[str], catalog: MoodCatalog | None = None) -> list[str]:
    """Ordered union of the genres mapped to each known mood; unknown moods are ignored."""
    genres: list[str] = []
    for name in names:
        mood = get_mood(name, catalog)
        if mood is None:
            continue
        for genre in mood.genres:
            if genre not in genres:
                genres.append(genre)
    return genres
