import logging
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence

from taste_engine import constants
from taste_engine.domain import MediaKey, MediaType, Score
from taste_engine.schemas.library import LibraryEntry
from taste_engine.schemas.recommendation import (
    BasedOn,
    MediaItem,
    Recommendation,
    RecommendedItem,
)
from taste_engine.services.moods import genres_for_moods

logger = logging.getLogger(__name__)

CandidatePool = Mapping[MediaType, Sequence[MediaItem]]


def select_favorites(
    library: Sequence[LibraryEntry],
    threshold: int = constants.FAVORITE_RATING_THRESHOLD,
) -> list[LibraryEntry]:
    """Entries rated at or above threshold, or every rated entry when none are."""
    favorites = [
        entry for entry in library if entry.rating is not None and entry.rating >= threshold
    ]
    if favorites:
        return favorites
    return [entry for entry in library if entry.rating is not None]


def genre_frequency(entries: Iterable[LibraryEntry]) -> Counter[str]:
    # A genre repeated within one entry counts once for that entry.
    counts: Counter[str] = Counter()
    for entry in entries:
        counts.update(list(dict.fromkeys(entry.genres)))
    return counts


def derive_target_genres(
    library: Sequence[LibraryEntry],
    threshold: int = constants.FAVORITE_RATING_THRESHOLD,
    top_n: int = constants.TOP_GENRE_COUNT,
) -> list[str]:
    """Most frequent genres among the user's favorites, ties in first-seen order."""
    counts = genre_frequency(select_favorites(library, threshold))
    return [genre for genre, _ in counts.most_common(top_n)]


def find_best_match(
    genres: frozenset[str], favorites: Iterable[LibraryEntry]
) -> LibraryEntry | None:
    """
    The favorite whose genres overlap most with a candidate's.

    Overlap is |shared| / max(|favorite genres|, |candidate genres|). The first
    favorite wins ties and a favorite with no overlap is never a match.
    """
    best: LibraryEntry | None = None
    best_score = 0.0
    for favorite in favorites:
        favorite_genres = favorite.genre_set
        denominator = max(len(favorite_genres), len(genres))
        if denominator == 0:
            continue
        score = len(favorite_genres & genres) / denominator
        if score > best_score:
            best, best_score = favorite, score
    return best


def compute_base_score(matched_count: int, target_size: int) -> float:
    if target_size == 0:
        return 0.0
    return matched_count / target_size * constants.MAX_SCORE


def _iter_candidates(
    pool: CandidatePool, media_type: MediaType | None
) -> Iterator[tuple[MediaType, MediaItem]]:
    seen: set[MediaKey] = set()
    for pool_type, items in pool.items():
        if media_type is not None and pool_type != media_type:
            continue
        for item in items:
            key = (MediaType(pool_type), item.id)
            if key in seen:
                continue
            seen.add(key)
            yield MediaType(pool_type), item


def _matched_genres(item: MediaItem, target: frozenset[str]) -> list[str]:
    return [genre for genre in dict.fromkeys(item.genres) if genre in target]


def _to_item(media_type: MediaType, item: MediaItem) -> RecommendedItem:
    return RecommendedItem(type=media_type, **item.model_dump())


def _rank(recommendations: list[Recommendation], limit: int) -> list[Recommendation]:
    # list.sort is stable with reverse=True, so ties keep scan order.
    recommendations.sort(key=lambda rec: rec.score, reverse=True)
    return recommendations[:limit]


def recommend(
    library: Sequence[LibraryEntry],
    pool: CandidatePool,
    *,
    target_genres: Iterable[str] | None = None,
    media_type: MediaType | None = None,
    cross_media_only: bool = False,
    limit: int = constants.DEFAULT_RESULT_LIMIT,
    favorite_threshold: int = constants.FAVORITE_RATING_THRESHOLD,
) -> list[Recommendation]:
    """
    Genre-affinity recommendations for one user across media types.

    Target genres default to the user's top favorite genres. Each result names
    the favorite it is most similar to and whether that favorite is of another
    media type. With cross_media_only, candidates whose best match is missing
    or of the same type are dropped.
    """
    if not library or limit <= 0:
        return []

    favorites = select_favorites(library, favorite_threshold)
    if target_genres is None:
        target_genres = derive_target_genres(library, favorite_threshold)
    target = frozenset(target_genres)
    if not target:
        return []

    owned = {entry.key for entry in library}
    results: list[Recommendation] = []
    for candidate_type, item in _iter_candidates(pool, media_type):
        if (candidate_type, item.id) in owned:
            continue

        matched = _matched_genres(item, target)
        score = compute_base_score(len(matched), len(target))
        if score == 0:
            continue

        best = find_best_match(frozenset(item.genres), favorites)
        cross_media = best is not None and best.media_type != candidate_type
        if cross_media_only and not cross_media:
            continue

        results.append(
            Recommendation(
                item=_to_item(candidate_type, item),
                reason=f"Matches your taste in {', '.join(matched[:2])}",
                score=Score(min(constants.MAX_SCORE, score)),
                based_on=(
                    BasedOn(
                        media_type=best.media_type,
                        media_id=best.media_id,
                        title=best.title or "your favorites",
                    )
                    if best is not None
                    else None
                ),
                cross_media=cross_media,
            )
        )

    logger.debug(
        "recommendations_scored",
        extra={"mode": "general", "target_genres": len(target), "scored": len(results)},
    )
    return _rank(results, limit)


def recommend_for_mood(
    library: Sequence[LibraryEntry],
    pool: CandidatePool,
    *,
    moods: Sequence[str] = (),
    target_genres: Iterable[str] | None = None,
    media_type: MediaType | None = None,
    limit: int = constants.DEFAULT_RESULT_LIMIT,
    bonus_per_genre: float = constants.MOOD_BONUS_PER_GENRE,
) -> list[Recommendation]:
    """
    Mood-based discovery: scores candidates against the genres of the chosen
    moods, plus a bonus for each candidate genre already present in the
    user's library. Scores are capped at 100.
    """
    if not library or limit <= 0:
        return []

    if target_genres is None:
        target_genres = genres_for_moods(moods)
    target = frozenset(target_genres)
    if not target:
        return []

    known_genres = genre_frequency(library)
    owned = {entry.key for entry in library}
    mood_label = moods[0].replace("-", " ") if moods else None

    results: list[Recommendation] = []
    for candidate_type, item in _iter_candidates(pool, media_type):
        if (candidate_type, item.id) in owned:
            continue

        matched = _matched_genres(item, target)
        base_score = compute_base_score(len(matched), len(target))
        if base_score == 0:
            continue

        bonus = bonus_per_genre * sum(
            1 for genre in dict.fromkeys(item.genres) if genre in known_genres
        )
        genres_text = ", ".join(matched[:2])
        reason = (
            f"Perfect for a {mood_label} mood: {genres_text}"
            if mood_label
            else f"Fits your mood for {genres_text}"
        )
        results.append(
            Recommendation(
                item=_to_item(candidate_type, item),
                reason=reason,
                score=Score(min(constants.MAX_SCORE, base_score + bonus)),
            )
        )

    logger.debug(
        "recommendations_scored",
        extra={"mode": "mood", "target_genres": len(target), "scored": len(results)},
    )
    return _rank(results, limit)
