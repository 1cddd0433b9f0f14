from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taste_engine.domain import MediaId, MediaKey, MediaType, Rating, UtcDatetime


class UserMediaRecord(BaseModel):
    """One raw row from a user's library, before normalization."""

    media_type: str | None = Field(
        default=None, description="Media type tag as stored", examples=["anime"]
    )
    media_id: str = Field(description="Identifier within the media type", examples=["mal-5114"])
    rating: int | None = Field(
        default=None, description="Rating on a 1-10 scale; 0 or null means unrated"
    )
    timestamp: UtcDatetime = Field(description="When the item was logged")
    updated_at: UtcDatetime | None = Field(
        default=None, description="Last modification time, used to pick between duplicates"
    )


class MediaMetadata(BaseModel):
    id: str
    title: str | None = None
    genres: list[str] | None = None
    poster_url: str | None = None
    creator: str | None = Field(default=None, description="Author, artist or studio")
    media_type: MediaType | None = Field(
        default=None, description="Optional type tag carried by the backing table row"
    )


class MediaCatalog(BaseModel):
    """Metadata joined from the five per-type backing tables, keyed by media id."""

    books: dict[str, MediaMetadata] = Field(default_factory=dict)
    anime: dict[str, MediaMetadata] = Field(default_factory=dict)
    manga: dict[str, MediaMetadata] = Field(default_factory=dict)
    movies: dict[str, MediaMetadata] = Field(default_factory=dict)
    music: dict[str, MediaMetadata] = Field(default_factory=dict)


class LibraryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    media_type: MediaType
    media_id: MediaId
    rating: Rating | None = None
    genres: list[str] = Field(default_factory=list)
    timestamp: UtcDatetime
    updated_at: UtcDatetime | None = None
    title: str | None = None
    poster_url: str | None = None
    creator: str | None = None

    @property
    def key(self) -> MediaKey:
        return (self.media_type, self.media_id)

    @property
    def genre_set(self) -> frozenset[str]:
        return frozenset(self.genres)

    @property
    def last_modified(self) -> datetime:
        return self.updated_at or self.timestamp
