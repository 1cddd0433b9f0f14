from pydantic import BaseModel, Field

from taste_engine.domain import ConsumptionStyle, MediaType, RatingPattern, UtcDatetime
from taste_engine.schemas.library import MediaCatalog, UserMediaRecord


class MonthlyRating(BaseModel):
    month: str = Field(description="Calendar month as YYYY-MM", examples=["2026-09"])
    avg: float = Field(ge=0.0, le=10.0)


class TasteProfile(BaseModel):
    total_items: int = Field(ge=0)
    media_type_distribution: dict[MediaType, int] = Field(default_factory=dict)
    most_active_media_type: MediaType | None = None
    top_genres_by_type: dict[MediaType, list[str]] = Field(default_factory=dict)
    favorite_genres: list[str] = Field(default_factory=list)
    average_rating: float = Field(ge=0.0, le=10.0)
    rating_distribution: dict[str, int] = Field(default_factory=dict)
    items_added_last_30_days: int = Field(ge=0)
    genre_diversity_score: float = Field(ge=0.0, le=10.0)
    activity_score: float = Field(ge=0.0, le=10.0)
    rating_pattern: RatingPattern
    consumption_style: ConsumptionStyle
    rating_trend: list[MonthlyRating] = Field(default_factory=list)


class TasteProfileRequest(BaseModel):
    records: list[UserMediaRecord] = Field(default_factory=list)
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)
    now: UtcDatetime | None = Field(default=None, description="Reference time; defaults to now")
