from taste_engine import constants
from taste_engine.schemas.compatibility import (
    CompatibilityInsight,
    CompatibilityResult,
    SimilarFavorite,
    TasteHighlights,
)
from taste_engine.services.compatibility import Library, LibraryComparison, compare_libraries


def extract_taste_highlights(
    library_a: Library,
    library_b: Library,
    *,
    comparison: LibraryComparison | None = None,
    favorite_threshold: int = constants.FAVORITE_RATING_THRESHOLD,
) -> TasteHighlights:
    comparison = comparison or compare_libraries(library_a, library_b)

    shared_genres = sorted(comparison.shared_genres)[: constants.SHARED_GENRES_LIMIT]

    favorites: list[SimilarFavorite] = []
    for pair in comparison.shared:
        rating_a, rating_b = pair.a.rating, pair.b.rating
        if rating_a is None or rating_b is None:
            continue
        if rating_a < favorite_threshold or rating_b < favorite_threshold:
            continue
        favorites.append(
            SimilarFavorite(
                media_type=pair.b.media_type,
                media_id=pair.b.media_id,
                title=pair.b.title or pair.a.title or "Unknown",
                both_rating=(rating_a + rating_b) / 2,
            )
        )

    # Stable sort: equal averages keep library_b order.
    favorites.sort(key=lambda favorite: favorite.both_rating, reverse=True)

    return TasteHighlights(
        shared_genres=shared_genres,
        similar_favorites=favorites[: constants.SIMILAR_FAVORITES_LIMIT],
    )


def count_close_ratings(
    comparison: LibraryComparison, max_delta: int = constants.CLOSE_RATING_DELTA
) -> int:
    """Shared, rated-by-both items whose ratings differ by at most max_delta."""
    return sum(
        1
        for pair in comparison.shared
        if pair.a.rating is not None
        and pair.b.rating is not None
        and abs(pair.a.rating - pair.b.rating) <= max_delta
    )


def _summary_for(score: int, shared_count: int) -> str:
    if score >= 80:
        return (
            f"Exceptional compatibility at {score}%! {shared_count} shared media items "
            "show remarkably aligned tastes."
        )
    if score >= 60:
        return (
            f"Great compatibility! {score}% similarity with {shared_count} shared items "
            "suggests strong common interests."
        )
    if score >= 40:
        return (
            f"Moderate compatibility at {score}% with {shared_count} shared items. "
            "There's common ground but also room for discovery."
        )
    return (
        f"{score}% compatibility with {shared_count} shared items. "
        "Different tastes create opportunities for new discoveries!"
    )


def build_compatibility_insight(
    result: CompatibilityResult,
    highlights: TasteHighlights,
    *,
    close_ratings: int = 0,
) -> CompatibilityInsight:
    """Template-based summary and highlight sentences for a compatibility result."""
    score = round(result.overall_score)
    lines: list[str] = []

    if highlights.similar_favorites:
        titles = ", ".join(favorite.title for favorite in highlights.similar_favorites[:3])
        lines.append(f"Both highly rated: {titles}")

    if close_ratings > 5:
        lines.append(f"Similar rating styles: {close_ratings} items rated within 1 point")

    if highlights.shared_genres:
        lines.append(f"Shared love for {', '.join(highlights.shared_genres[:3])}")

    if not lines:
        lines.append(f"Shared {result.shared_items_count} media items")

    return CompatibilityInsight(
        summary=_summary_for(score, result.shared_items_count),
        highlights=lines,
    )
