from datetime import UTC, datetime

from taste_engine.domain import MediaId, MediaType
from taste_engine.schemas.compatibility import (
    CompatibilityResult,
    SimilarFavorite,
    TasteHighlights,
)
from taste_engine.schemas.library import LibraryEntry
from taste_engine.services.compatibility import compare_libraries
from taste_engine.services.highlights import (
    build_compatibility_insight,
    count_close_ratings,
    extract_taste_highlights,
)

NOW = datetime(2026, 5, 1, tzinfo=UTC)


def _make_entry(
    media_id: str,
    rating: int | None = None,
    genres: list[str] | None = None,
    title: str | None = None,
    media_type: MediaType = MediaType.ANIME,
) -> LibraryEntry:
    return LibraryEntry(
        media_type=media_type,
        media_id=MediaId(media_id),
        rating=rating,
        genres=genres or [],
        timestamp=NOW,
        title=title,
    )


def _make_result(overall_score: float, shared_items_count: int) -> CompatibilityResult:
    return CompatibilityResult(
        overall_score=overall_score,
        genre_overlap_score=0.0,
        rating_correlation=0.0,
        shared_items_count=shared_items_count,
        per_type_compatibility={media_type: 0.0 for media_type in MediaType},
    )


def test_shared_genres_are_sorted_and_capped() -> None:
    genres = [f"Genre {chr(ord('A') + i)}" for i in range(12)]
    library_a = [_make_entry("a1", genres=list(reversed(genres)))]
    library_b = [_make_entry("a2", genres=genres)]

    highlights = extract_taste_highlights(library_a, library_b)

    assert highlights.shared_genres == sorted(genres)[:10]


def test_similar_favorites_require_both_ratings_at_threshold() -> None:
    library_a = [
        _make_entry("a1", rating=9, title="Frieren"),
        _make_entry("a2", rating=7, title="Mob Psycho"),
        _make_entry("a3", rating=10, title="Monster"),
        _make_entry("a4", title="Unrated"),
    ]
    library_b = [
        _make_entry("a1", rating=8, title="Frieren"),
        _make_entry("a2", rating=10, title="Mob Psycho"),
        _make_entry("a3", rating=10, title="Monster"),
        _make_entry("a4", rating=10, title="Unrated"),
    ]

    highlights = extract_taste_highlights(library_a, library_b)

    assert [favorite.media_id for favorite in highlights.similar_favorites] == ["a3", "a1"]
    assert highlights.similar_favorites[0].both_rating == 10.0
    assert highlights.similar_favorites[1].both_rating == 8.5


def test_similar_favorites_ties_keep_second_library_order_and_cap_at_five() -> None:
    library_a = [_make_entry(f"a{i}", rating=9) for i in range(7)]
    library_b = [_make_entry(f"a{i}", rating=9) for i in reversed(range(7))]

    highlights = extract_taste_highlights(library_a, library_b)

    assert [favorite.media_id for favorite in highlights.similar_favorites] == [
        "a6",
        "a5",
        "a4",
        "a3",
        "a2",
    ]


def test_similar_favorite_title_falls_back() -> None:
    library_a = [_make_entry("a1", rating=9, title="From A"), _make_entry("a2", rating=9)]
    library_b = [_make_entry("a1", rating=9), _make_entry("a2", rating=9)]

    highlights = extract_taste_highlights(library_a, library_b)

    assert [favorite.title for favorite in highlights.similar_favorites] == ["From A", "Unknown"]


def test_highlights_for_disjoint_libraries_are_empty() -> None:
    highlights = extract_taste_highlights([_make_entry("a1", genres=["Drama"])], [])

    assert highlights == TasteHighlights()


def test_count_close_ratings() -> None:
    comparison = compare_libraries(
        [_make_entry("a1", rating=8), _make_entry("a2", rating=3), _make_entry("a3")],
        [_make_entry("a1", rating=9), _make_entry("a2", rating=9), _make_entry("a3", rating=1)],
    )

    assert count_close_ratings(comparison) == 1


def test_insight_summary_bands() -> None:
    empty = TasteHighlights()

    assert build_compatibility_insight(_make_result(85, 12), empty).summary.startswith(
        "Exceptional compatibility at 85%"
    )
    assert build_compatibility_insight(_make_result(60, 4), empty).summary.startswith(
        "Great compatibility! 60%"
    )
    assert build_compatibility_insight(_make_result(45, 2), empty).summary.startswith(
        "Moderate compatibility at 45%"
    )
    assert build_compatibility_insight(_make_result(10, 0), empty).summary.startswith(
        "10% compatibility with 0 shared items"
    )


def test_insight_highlight_lines() -> None:
    highlights = TasteHighlights(
        shared_genres=["Action", "Drama", "Fantasy", "Horror"],
        similar_favorites=[
            SimilarFavorite(
                media_type=MediaType.MOVIE, media_id="m1", title="Arrival", both_rating=9.5
            )
        ],
    )

    insight = build_compatibility_insight(_make_result(70, 8), highlights, close_ratings=6)

    assert insight.highlights == [
        "Both highly rated: Arrival",
        "Similar rating styles: 6 items rated within 1 point",
        "Shared love for Action, Drama, Fantasy",
    ]


def test_insight_falls_back_to_shared_count() -> None:
    insight = build_compatibility_insight(_make_result(20, 3), TasteHighlights(), close_ratings=2)

    assert insight.highlights == ["Shared 3 media items"]
