from pydantic import BaseModel, ConfigDict, Field

from taste_engine import constants
from taste_engine.domain import MediaId, MediaType, Score
from taste_engine.schemas.library import MediaCatalog, UserMediaRecord


class MediaItem(BaseModel):
    """A candidate item supplied by the candidate pool collaborator."""

    model_config = ConfigDict(frozen=True)

    id: MediaId = Field(examples=["tmdb-603"])
    title: str = Field(examples=["The Matrix"])
    genres: list[str] = Field(default_factory=list, examples=[["Action", "Sci-Fi"]])
    poster_url: str | None = None
    creator: str | None = Field(default=None, description="Author, artist or studio")


class RecommendedItem(MediaItem):
    type: MediaType


class BasedOn(BaseModel):
    media_type: MediaType
    media_id: MediaId
    title: str = Field(description="Title of the library entry, or a generic label")


class Recommendation(BaseModel):
    item: RecommendedItem
    reason: str = Field(examples=["Matches your taste in Action, Sci-Fi"])
    score: Score = Field(description="Recommendation strength, 0-100", ge=0.0, le=100.0)
    based_on: BasedOn | None = Field(
        default=None, description="Library favorite most responsible for the score"
    )
    cross_media: bool = Field(
        default=False, description="True when based_on is of a different media type"
    )


class RecommendationRequest(BaseModel):
    records: list[UserMediaRecord] = Field(description="Raw library records of the requester")
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)
    candidate_pool: dict[MediaType, list[MediaItem]] = Field(default_factory=dict)
    target_genres: list[str] | None = Field(
        default=None, description="Explicit target genres; derived from favorites when absent"
    )
    media_type: MediaType | None = Field(default=None, description="Restrict to one media type")
    cross_media_only: bool = False
    limit: int = Field(default=constants.DEFAULT_RESULT_LIMIT, ge=0, le=100)


class MoodRecommendationRequest(BaseModel):
    records: list[UserMediaRecord] = Field(description="Raw library records of the requester")
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)
    candidate_pool: dict[MediaType, list[MediaItem]] = Field(default_factory=dict)
    moods: list[str] = Field(default_factory=list, examples=[["cozy", "happy"]])
    target_genres: list[str] | None = Field(
        default=None, description="Explicit mood genres; overrides the mood catalog"
    )
    media_type: MediaType | None = None
    limit: int = Field(default=constants.DEFAULT_RESULT_LIMIT, ge=0, le=100)


class RecommendationsResponse(BaseModel):
    recommendations: list[Recommendation] = Field(description="Ranked recommendations")
