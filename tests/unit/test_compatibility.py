from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

import pytest

from taste_engine.domain import MediaId, MediaType, UserId
from taste_engine.schemas.compatibility import ScoringWeights
from taste_engine.schemas.library import LibraryEntry
from taste_engine.services.compatibility import (
    compare_libraries,
    compute_compatibility,
    compute_genre_overlap,
    compute_rating_correlation,
    compute_type_compatibility,
    score_against_population,
)

NOW = datetime(2026, 5, 1, tzinfo=UTC)


def _make_entry(
    media_id: str,
    media_type: MediaType = MediaType.BOOK,
    rating: int | None = None,
    genres: list[str] | None = None,
) -> LibraryEntry:
    return LibraryEntry(
        media_type=media_type,
        media_id=MediaId(media_id),
        rating=rating,
        genres=genres or [],
        timestamp=NOW,
    )


def _make_library() -> list[LibraryEntry]:
    return [
        _make_entry("b1", rating=9, genres=["Sci-Fi", "Classic"]),
        _make_entry("b2", rating=6, genres=["Fantasy"]),
        _make_entry("a1", MediaType.ANIME, rating=10, genres=["Fantasy", "Adventure"]),
        _make_entry("m1", MediaType.MOVIE, genres=["Drama"]),
    ]


def test_single_shared_book_scores_sixty_nine() -> None:
    user_a = [_make_entry("X", rating=9, genres=["SciFi"])]
    user_b = [_make_entry("X", rating=8, genres=["SciFi"])]

    result = compute_compatibility(user_a, user_b)

    assert result.shared_items_count == 1
    assert result.rating_correlation == pytest.approx(0.9)
    assert result.genre_overlap_score == pytest.approx(100.0)
    assert result.per_type_compatibility[MediaType.BOOK] == pytest.approx(100.0)
    assert result.per_type_compatibility[MediaType.ANIME] == 0.0
    assert result.overall_score == pytest.approx(69.0)


def test_empty_library_scores_zero() -> None:
    result = compute_compatibility([], _make_library())

    assert result.shared_items_count == 0
    assert result.genre_overlap_score == 0.0
    assert result.rating_correlation == 0.0
    assert result.overall_score == 0.0
    assert set(result.per_type_compatibility) == set(MediaType)
    assert all(score == 0.0 for score in result.per_type_compatibility.values())


def test_both_libraries_empty_scores_zero() -> None:
    result = compute_compatibility([], [])

    assert result.overall_score == 0.0
    assert result.genre_overlap_score == 0.0


def test_compatibility_is_symmetric() -> None:
    library_a = _make_library()
    library_b = [
        _make_entry("b1", rating=5, genres=["Sci-Fi"]),
        _make_entry("a1", MediaType.ANIME, rating=7, genres=["Fantasy"]),
        _make_entry("a2", MediaType.ANIME, rating=8, genres=["Romance"]),
    ]

    forward = compute_compatibility(library_a, library_b)
    backward = compute_compatibility(library_b, library_a)

    assert forward.shared_items_count == backward.shared_items_count
    assert forward.genre_overlap_score == pytest.approx(backward.genre_overlap_score)
    assert forward.rating_correlation == pytest.approx(backward.rating_correlation)
    assert forward.overall_score == pytest.approx(backward.overall_score)
    for media_type in MediaType:
        assert forward.per_type_compatibility[media_type] == pytest.approx(
            backward.per_type_compatibility[media_type]
        )


def test_identical_libraries() -> None:
    library = _make_library()

    result = compute_compatibility(library, list(library))

    assert result.rating_correlation == 1.0
    assert result.genre_overlap_score == pytest.approx(100.0)
    assert result.shared_items_count == len(library)


def test_scores_stay_within_bounds_for_large_libraries() -> None:
    library = [
        _make_entry(f"b{i}", rating=(i % 10) + 1, genres=[f"G{i % 7}"]) for i in range(200)
    ]
    other = [_make_entry(f"b{i}", rating=10 - (i % 10), genres=["G1"]) for i in range(150)]

    result = compute_compatibility(library, other)

    assert 0.0 <= result.overall_score <= 100.0
    assert result.overall_score == 100.0
    assert 0.0 <= result.genre_overlap_score <= 100.0
    assert 0.0 <= result.rating_correlation <= 1.0
    assert all(0.0 <= score <= 100.0 for score in result.per_type_compatibility.values())


def test_adding_shared_item_never_decreases_score() -> None:
    library_a = [_make_entry("b1", rating=8, genres=["Drama"])]
    library_b = [
        _make_entry("b1", rating=4, genres=["Drama"]),
        _make_entry("b9", rating=6, genres=["Horror"]),
    ]
    before = compute_compatibility(library_a, library_b)

    extra = _make_entry("b2", rating=7, genres=["Drama"])
    after = compute_compatibility([*library_a, extra], [*library_b, extra])

    assert after.overall_score >= before.overall_score


def test_rating_correlation_ignores_unrated_pairs() -> None:
    comparison = compare_libraries(
        [_make_entry("b1", rating=10), _make_entry("b2")],
        [_make_entry("b1", rating=6), _make_entry("b2", rating=3)],
    )

    assert compute_rating_correlation(comparison.shared) == pytest.approx(0.6)


def test_rating_correlation_without_rated_pairs_is_zero() -> None:
    comparison = compare_libraries([_make_entry("b1")], [_make_entry("b1", rating=5)])

    assert compute_rating_correlation(comparison.shared) == 0.0


def test_genre_overlap_is_jaccard() -> None:
    score = compute_genre_overlap(frozenset({"A", "B", "C"}), frozenset({"B", "C", "D"}))

    assert score == pytest.approx(50.0)
    assert compute_genre_overlap(frozenset(), frozenset()) == 0.0


def test_type_compatibility_uses_smaller_library_per_type() -> None:
    comparison = compare_libraries(
        [_make_entry("b1"), _make_entry("b2"), _make_entry("b3")],
        [_make_entry("b1"), _make_entry("b2"), _make_entry("m1", MediaType.MOVIE)],
    )

    scores = compute_type_compatibility(comparison)

    assert scores[MediaType.BOOK] == pytest.approx(100.0)
    assert scores[MediaType.MOVIE] == 0.0


def test_custom_weights_change_composite() -> None:
    user_a = [_make_entry("X", rating=9, genres=["SciFi"])]
    user_b = [_make_entry("X", rating=8, genres=["SciFi"])]
    weights = ScoringWeights(shared_item=0, genre_overlap=0, rating_correlation=0, per_type=0)

    assert compute_compatibility(user_a, user_b, weights).overall_score == 0.0


def test_score_against_population_keeps_input_order() -> None:
    subject = _make_library()
    candidates = [
        (UserId("u1"), [_make_entry("m9", MediaType.MOVIE, genres=["Horror"])]),
        (UserId("u2"), list(subject)),
        (UserId("u3"), []),
    ]

    scored = score_against_population(subject, candidates)

    assert [subject_id for subject_id, _ in scored] == ["u1", "u2", "u3"]
    assert scored[1][1].shared_items_count == len(subject)
    assert scored[2][1].overall_score == 0.0


def test_score_against_population_can_require_shared_item() -> None:
    subject = _make_library()
    candidates = [
        (UserId("u1"), [_make_entry("m9", MediaType.MOVIE, genres=["Drama"])]),
        (UserId("u2"), [_make_entry("b1", rating=9)]),
    ]

    scored = score_against_population(subject, candidates, require_shared_item=True)

    assert [subject_id for subject_id, _ in scored] == ["u2"]


def test_score_against_population_with_executor_matches_inline() -> None:
    subject = _make_library()
    candidates = [
        (UserId(f"u{i}"), [_make_entry(f"b{i}", rating=i + 1, genres=["Fantasy"])])
        for i in range(6)
    ]

    inline = score_against_population(subject, candidates)
    with ThreadPoolExecutor(max_workers=2) as executor:
        mapped = score_against_population(subject, candidates, executor=executor)

    assert mapped == inline


def test_score_against_population_empty() -> None:
    assert score_against_population(_make_library(), []) == []
