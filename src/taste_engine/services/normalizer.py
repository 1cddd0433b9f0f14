import logging
from collections.abc import Callable, Iterable, Mapping

from taste_engine.domain import MediaId, MediaKey, MediaType, Rating
from taste_engine.errors import DataIntegrityError, MalformedRecordError
from taste_engine.schemas.library import (
    LibraryEntry,
    MediaCatalog,
    MediaMetadata,
    UserMediaRecord,
)

logger = logging.getLogger(__name__)

MetadataAccessor = Callable[[MediaCatalog], Mapping[str, MediaMetadata]]

# One backing table per media type, resolved here and nowhere else.
METADATA_ACCESSORS: dict[MediaType, MetadataAccessor] = {
    MediaType.BOOK: lambda catalog: catalog.books,
    MediaType.ANIME: lambda catalog: catalog.anime,
    MediaType.MANGA: lambda catalog: catalog.manga,
    MediaType.MOVIE: lambda catalog: catalog.movies,
    MediaType.MUSIC: lambda catalog: catalog.music,
}


def parse_media_type(raw: str | None, *, media_id: str) -> MediaType:
    if raw is None or not raw.strip():
        raise MalformedRecordError(f"Record media_id={media_id!r} has no media_type")
    try:
        return MediaType(raw.strip().lower())
    except ValueError:
        raise MalformedRecordError(
            f"Record media_id={media_id!r} has unknown media_type={raw!r}"
        ) from None


def parse_rating(raw: int | None, *, media_id: str) -> Rating | None:
    if raw is None or raw == 0:
        return None
    if not 1 <= raw <= 10:
        raise MalformedRecordError(
            f"Record media_id={media_id!r} has rating={raw} outside the 1-10 scale"
        )
    return Rating(raw)


def clean_genres(genres: list[str] | None) -> list[str]:
    if not genres:
        return []
    return [genre.strip() for genre in genres if genre and genre.strip()]


def _to_entry(
    record: UserMediaRecord, media_type: MediaType, metadata: MediaMetadata | None
) -> LibraryEntry:
    if metadata is not None and metadata.media_type is not None:
        if metadata.media_type != media_type:
            raise DataIntegrityError(
                f"Record ({media_type}, {record.media_id!r}) joined metadata tagged "
                f"{metadata.media_type}"
            )

    return LibraryEntry(
        media_type=media_type,
        media_id=MediaId(record.media_id),
        rating=parse_rating(record.rating, media_id=record.media_id),
        genres=clean_genres(metadata.genres if metadata else None),
        timestamp=record.timestamp,
        updated_at=record.updated_at,
        title=metadata.title if metadata else None,
        poster_url=metadata.poster_url if metadata else None,
        creator=metadata.creator if metadata else None,
    )


def normalize_library(
    records: Iterable[UserMediaRecord], catalog: MediaCatalog | None = None
) -> list[LibraryEntry]:
    """
    Converts raw per-type records into a uniform, de-duplicated library.

    Entries whose metadata cannot be resolved are kept with empty genres.
    When the same (media_type, media_id) appears more than once, the most
    recently updated record wins; on equal recency the later record wins.

    Raises:
        MalformedRecordError: a record lacks a valid media_type or rating.
        DataIntegrityError: joined metadata is tagged with another media_type.
    """
    catalog = catalog or MediaCatalog()
    tables = {media_type: accessor(catalog) for media_type, accessor in METADATA_ACCESSORS.items()}

    entries: dict[MediaKey, LibraryEntry] = {}
    total = 0
    unresolved = 0
    for record in records:
        total += 1
        media_type = parse_media_type(record.media_type, media_id=record.media_id)
        metadata = tables[media_type].get(record.media_id)
        if metadata is None:
            unresolved += 1

        entry = _to_entry(record, media_type, metadata)
        existing = entries.get(entry.key)
        if existing is None or entry.last_modified >= existing.last_modified:
            entries[entry.key] = entry

    logger.debug(
        "library_normalized",
        extra={"records": total, "entries": len(entries), "unresolved_metadata": unresolved},
    )
    return list(entries.values())
