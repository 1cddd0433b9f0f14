from pydantic import BaseModel, Field

from taste_engine import constants
from taste_engine.domain import LeaderboardCategory, LeaderboardPeriod, UserId, UtcDatetime
from taste_engine.schemas.compatibility import UserLibraryPayload
from taste_engine.schemas.library import MediaCatalog


class ScoredSubject(BaseModel):
    subject_id: str = Field(min_length=1, examples=["usr_42"])
    score: float = Field(allow_inf_nan=False, examples=[87.5])
    label: str | None = Field(default=None, examples=["ratings"])


class RankedEntry(BaseModel):
    rank: int = Field(ge=1, description="1-based rank")
    subject_id: str
    score: float
    label: str | None = None


class Leaderboard(BaseModel):
    category: LeaderboardCategory
    period: LeaderboardPeriod
    entries: list[RankedEntry]
    subject_rank: int | None = Field(
        default=None, description="Rank of the requesting subject in the full population"
    )


class RankingRequest(BaseModel):
    items: list[ScoredSubject] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=0, description="Top-K slice; all when absent")
    subject_id: str | None = Field(default=None, description="Subject whose rank to report")


class RankingResponse(BaseModel):
    entries: list[RankedEntry]
    subject_rank: int | None = None


class TopRatersRequest(BaseModel):
    population: list[UserLibraryPayload] = Field(default_factory=list)
    catalog: MediaCatalog = Field(default_factory=MediaCatalog)
    period: LeaderboardPeriod = "all_time"
    subject_id: UserId | None = None
    now: UtcDatetime | None = Field(default=None, description="Reference time; defaults to now")
    limit: int = Field(default=constants.LEADERBOARD_SIZE, ge=1, le=constants.LEADERBOARD_SIZE)
