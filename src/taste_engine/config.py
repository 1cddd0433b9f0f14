from pydantic_settings import BaseSettings, SettingsConfigDict

from taste_engine import constants
from taste_engine.schemas.compatibility import ScoringWeights


class Settings(BaseSettings):
    app_name: str = "Taste Engine"
    app_version: str = "0.1.0"
    app_description: str = (
        "Taste compatibility scoring and cross-media recommendations over user media libraries."
    )
    log_level: str = "INFO"
    log_format: str = "json"
    log_service_name: str = "taste-engine"

    shared_item_weight: float = constants.SHARED_ITEM_WEIGHT
    genre_overlap_weight: float = constants.GENRE_OVERLAP_WEIGHT
    rating_correlation_weight: float = constants.RATING_CORRELATION_WEIGHT
    per_type_weight: float = constants.PER_TYPE_WEIGHT

    favorite_rating_threshold: int = constants.FAVORITE_RATING_THRESHOLD
    mood_bonus_per_genre: float = constants.MOOD_BONUS_PER_GENRE

    # Populations at or above this size are scored on a process pool.
    parallel_threshold: int = 64
    max_workers: int | None = None

    model_config = SettingsConfigDict(
        env_prefix="TASTE_ENGINE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(
            shared_item=self.shared_item_weight,
            genre_overlap=self.genre_overlap_weight,
            rating_correlation=self.rating_correlation_weight,
            per_type=self.per_type_weight,
        )


settings = Settings()
