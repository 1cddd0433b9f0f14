import logging
import os
from collections import Counter
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial

from taste_engine import constants
from taste_engine.config import settings
from taste_engine.domain import MediaKey, MediaType, UserId
from taste_engine.schemas.compatibility import (
    DEFAULT_WEIGHTS,
    CompatibilityResult,
    ScoringWeights,
)
from taste_engine.schemas.library import LibraryEntry

logger = logging.getLogger(__name__)

Library = Sequence[LibraryEntry]


@dataclass(frozen=True, slots=True)
class SharedPair:
    a: LibraryEntry
    b: LibraryEntry


@dataclass(frozen=True, slots=True)
class LibraryComparison:
    """Set computations shared by the scorer and the highlight extractor."""

    shared: list[SharedPair]
    genres_a: frozenset[str]
    genres_b: frozenset[str]
    type_counts_a: Counter[MediaType]
    type_counts_b: Counter[MediaType]

    @property
    def shared_genres(self) -> frozenset[str]:
        return self.genres_a & self.genres_b


def index_library(library: Library) -> dict[MediaKey, LibraryEntry]:
    return {entry.key: entry for entry in library}


def genre_union(library: Library) -> frozenset[str]:
    return frozenset(genre for entry in library for genre in entry.genres)


def compare_libraries(library_a: Library, library_b: Library) -> LibraryComparison:
    # Shared pairs follow library_b order.
    index_a = index_library(library_a)
    shared = [
        SharedPair(a=index_a[key], b=entry)
        for key, entry in index_library(library_b).items()
        if key in index_a
    ]
    return LibraryComparison(
        shared=shared,
        genres_a=genre_union(library_a),
        genres_b=genre_union(library_b),
        type_counts_a=Counter(entry.media_type for entry in library_a),
        type_counts_b=Counter(entry.media_type for entry in library_b),
    )


def compute_rating_correlation(shared: Iterable[SharedPair]) -> float:
    """
    Similarity of ratings on shared items, in [0, 1].

    This is 1 - (mean absolute rating difference / 10), not a Pearson or
    Spearman coefficient: it rewards small differences, not covariance.
    Pairs where either side is unrated are ignored; no rated pairs gives 0.
    """
    diffs = [
        abs(pair.a.rating - pair.b.rating)
        for pair in shared
        if pair.a.rating is not None and pair.b.rating is not None
    ]
    if not diffs:
        return 0.0
    mean_diff = sum(diffs) / len(diffs)
    return max(0.0, 1.0 - mean_diff / constants.RATING_SCALE)


def compute_genre_overlap(genres_a: frozenset[str], genres_b: frozenset[str]) -> float:
    """Jaccard similarity of two genre sets, scaled to 0-100."""
    total = len(genres_a | genres_b)
    if total == 0:
        return 0.0
    return len(genres_a & genres_b) / total * constants.MAX_SCORE


def compute_type_compatibility(comparison: LibraryComparison) -> dict[MediaType, float]:
    shared_by_type = Counter(pair.a.media_type for pair in comparison.shared)
    scores: dict[MediaType, float] = {}
    for media_type in MediaType:
        smaller = min(comparison.type_counts_a[media_type], comparison.type_counts_b[media_type])
        if smaller == 0:
            scores[media_type] = 0.0
            continue
        overlap_ratio = shared_by_type[media_type] / smaller
        scores[media_type] = min(constants.MAX_SCORE, overlap_ratio * constants.MAX_SCORE)
    return scores


def compute_compatibility(
    library_a: Library,
    library_b: Library,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    *,
    comparison: LibraryComparison | None = None,
) -> CompatibilityResult:
    """
    Scores how compatible two normalized libraries are.

    The composite is summed unclamped and capped at 100 only at the end, so a
    large enough shared-item count reaches the ceiling on its own.
    """
    comparison = comparison or compare_libraries(library_a, library_b)

    shared_items_count = len(comparison.shared)
    rating_correlation = compute_rating_correlation(comparison.shared)
    genre_overlap_score = compute_genre_overlap(comparison.genres_a, comparison.genres_b)
    per_type = compute_type_compatibility(comparison)

    raw_score = (
        shared_items_count * weights.shared_item
        + (genre_overlap_score / constants.MAX_SCORE) * weights.genre_overlap
        + rating_correlation * weights.rating_correlation
        + sum(score * weights.per_type for score in per_type.values())
    )

    return CompatibilityResult(
        overall_score=min(constants.MAX_SCORE, raw_score),
        genre_overlap_score=genre_overlap_score,
        rating_correlation=rating_correlation,
        shared_items_count=shared_items_count,
        per_type_compatibility=per_type,
    )


def shares_any_item(subject_keys: frozenset[MediaKey], library: Library) -> bool:
    return any(entry.key in subject_keys for entry in library)


def score_against_population(
    subject: Library,
    candidates: Iterable[tuple[UserId, Library]],
    *,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    require_shared_item: bool = False,
    executor: Executor | None = None,
    max_workers: int | None = None,
) -> list[tuple[UserId, CompatibilityResult]]:
    """
    Scores one subject library against many candidate libraries.

    Each pair is independent. With an injected executor the pairs are mapped
    across it; otherwise large populations go to a process pool sized to the
    available CPUs and small ones are scored inline. Output keeps input order.
    """
    population = list(candidates)
    if require_shared_item:
        subject_keys = frozenset(entry.key for entry in subject)
        population = [
            (subject_id, library)
            for subject_id, library in population
            if shares_any_item(subject_keys, library)
        ]
    if not population:
        return []

    subject_ids = [subject_id for subject_id, _ in population]
    libraries = [list(library) for _, library in population]
    score = partial(compute_compatibility, list(subject), weights=weights)

    mode = "inline"
    if executor is not None:
        mode = "executor"
        results = list(executor.map(score, libraries))
    elif len(population) >= settings.parallel_threshold:
        workers = max_workers or settings.max_workers or os.cpu_count() or 1
        mode = "process_pool"
        chunksize = max(1, len(libraries) // (workers * 4))
        with ProcessPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(score, libraries, chunksize=chunksize))
    else:
        results = [score(library) for library in libraries]

    logger.debug(
        "population_scored",
        extra={"population": len(population), "mode": mode},
    )
    return list(zip(subject_ids, results, strict=True))
