import typing
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AfterValidator, Field

if typing.TYPE_CHECKING:
    MediaId = typing.NewType("MediaId", str)
    UserId = typing.NewType("UserId", str)
    Rating = typing.NewType("Rating", int)
    Score = typing.NewType("Score", float)
else:
    _MediaIdStr = Annotated[str, Field(min_length=1)]
    MediaId = typing.NewType("MediaId", _MediaIdStr)

    _UserIdStr = Annotated[str, Field(min_length=1)]
    UserId = typing.NewType("UserId", _UserIdStr)

    _RatingInt = Annotated[int, Field(ge=1, le=10)]
    Rating = typing.NewType("Rating", _RatingInt)

    _ScoreFloat = Annotated[float, Field(ge=0.0, le=100.0)]
    Score = typing.NewType("Score", _ScoreFloat)


class MediaType(StrEnum):
    BOOK = "book"
    ANIME = "anime"
    MANGA = "manga"
    MOVIE = "movie"
    MUSIC = "music"


# (media_type, media_id) identifies one item across all backing tables.
MediaKey = tuple[MediaType, str]

LeaderboardPeriod = Literal["all_time", "monthly", "weekly"]
LeaderboardCategory = Literal["top_raters"]
RatingPattern = Literal["generous", "balanced", "harsh"]
ConsumptionStyle = Literal["diverse_explorer", "binge_watcher", "steady_reader", "casual_enjoyer"]


def as_utc(value: datetime) -> datetime:
    """Converts to aware UTC; a timestamp without tzinfo is taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
