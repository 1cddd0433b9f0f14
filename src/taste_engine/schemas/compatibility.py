from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from taste_engine import constants
from taste_engine.domain import MediaId, MediaType, UserId
from taste_engine.schemas.library import MediaCatalog, UserMediaRecord

_Percent = Annotated[float, Field(ge=0.0, le=100.0)]


class ScoringWeights(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    shared_item: float = Field(default=constants.SHARED_ITEM_WEIGHT, ge=0.0)
    genre_overlap: float = Field(default=constants.GENRE_OVERLAP_WEIGHT, ge=0.0)
    rating_correlation: float = Field(default=constants.RATING_CORRELATION_WEIGHT, ge=0.0)
    per_type: float = Field(default=constants.PER_TYPE_WEIGHT, ge=0.0)


DEFAULT_WEIGHTS = ScoringWeights()


class CompatibilityResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall_score: _Percent = Field(description="Composite MashScore, 0-100", examples=[69.0])
    genre_overlap_score: _Percent = Field(
        description="Jaccard similarity of the two genre sets, scaled to 100", examples=[100.0]
    )
    rating_correlation: float = Field(
        ge=0.0,
        le=1.0,
        description=(
            "Similarity of ratings on shared items: 1 - mean absolute difference / 10. "
            "Not a statistical correlation coefficient."
        ),
        examples=[0.9],
    )
    shared_items_count: int = Field(ge=0, description="Items present in both libraries")
    per_type_compatibility: dict[MediaType, _Percent] = Field(
        description="Overlap score per media type, 0-100"
    )


class SimilarFavorite(BaseModel):
    media_type: MediaType
    media_id: MediaId
    title: str = Field(examples=["Frieren"])
    both_rating: float = Field(ge=1.0, le=10.0, description="Mean of both users' ratings")


class TasteHighlights(BaseModel):
    shared_genres: list[str] = Field(default_factory=list, max_length=constants.SHARED_GENRES_LIMIT)
    similar_favorites: list[SimilarFavorite] = Field(
        default_factory=list, max_length=constants.SIMILAR_FAVORITES_LIMIT
    )


class CompatibilityInsight(BaseModel):
    summary: str
    highlights: list[str] = Field(default_factory=list)


class CandidateMatch(BaseModel):
    subject_id: UserId
    compatibility: CompatibilityResult
    taste_highlights: TasteHighlights


class UserLibraryPayload(BaseModel):
    user_id: UserId
    records: list[UserMediaRecord] = Field(default_factory=list)


class CompatibilityRequest(BaseModel):
    library_a: list[UserMediaRecord] = Field(description="Raw records of the first user")
    library_b: list[UserMediaRecord] = Field(description="Raw records of the second user")
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)


class CompatibilityResponse(BaseModel):
    compatibility: CompatibilityResult
    taste_highlights: TasteHighlights
    insight: CompatibilityInsight


class CandidateMatchesRequest(BaseModel):
    subject: UserLibraryPayload
    population: list[UserLibraryPayload] = Field(default_factory=list)
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)
    require_shared_item: bool = Field(
        default=False, description="Skip candidates sharing no item with the subject"
    )


class CandidateMatchesResponse(BaseModel):
    candidates: list[CandidateMatch]
