import logging
from collections.abc import Iterable
from concurrent.futures import Executor
from typing import NamedTuple

from taste_engine import constants
from taste_engine.domain import UserId
from taste_engine.schemas.compatibility import (
    DEFAULT_WEIGHTS,
    CandidateMatch,
    CompatibilityInsight,
    CompatibilityResult,
    ScoringWeights,
    TasteHighlights,
)
from taste_engine.services.compatibility import (
    Library,
    compare_libraries,
    compute_compatibility,
    score_against_population,
    shares_any_item,
)
from taste_engine.services.highlights import (
    build_compatibility_insight,
    count_close_ratings,
    extract_taste_highlights,
)

logger = logging.getLogger(__name__)


class PairReport(NamedTuple):
    compatibility: CompatibilityResult
    taste_highlights: TasteHighlights
    insight: CompatibilityInsight


def compare_users(
    library_a: Library,
    library_b: Library,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    favorite_threshold: int = constants.FAVORITE_RATING_THRESHOLD,
) -> PairReport:
    """Scores a pair and explains it, sharing one set computation between both steps."""
    comparison = compare_libraries(library_a, library_b)
    result = compute_compatibility(library_a, library_b, weights, comparison=comparison)
    highlights = extract_taste_highlights(
        library_a,
        library_b,
        comparison=comparison,
        favorite_threshold=favorite_threshold,
    )
    insight = build_compatibility_insight(
        result, highlights, close_ratings=count_close_ratings(comparison)
    )
    return PairReport(compatibility=result, taste_highlights=highlights, insight=insight)


def find_candidate_matches(
    subject_id: UserId,
    subject: Library,
    population: Iterable[tuple[UserId, Library]],
    *,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    require_shared_item: bool = False,
    limit: int = constants.CANDIDATE_MATCH_LIMIT,
    favorite_threshold: int = constants.FAVORITE_RATING_THRESHOLD,
    executor: Executor | None = None,
) -> list[CandidateMatch]:
    """
    Ranks other users by MashScore against one subject.

    The subject itself and users with empty libraries are skipped. Equal
    scores keep population order.
    """
    if not subject or limit <= 0:
        return []

    others = [
        (candidate_id, library)
        for candidate_id, library in population
        if candidate_id != subject_id and library
    ]
    if require_shared_item:
        subject_keys = frozenset(entry.key for entry in subject)
        others = [
            (candidate_id, library)
            for candidate_id, library in others
            if shares_any_item(subject_keys, library)
        ]

    # Scores come back in population order, so each stays paired with its library.
    results = score_against_population(subject, others, weights=weights, executor=executor)
    scored = [
        (candidate_id, library, result)
        for (candidate_id, library), (_, result) in zip(others, results, strict=True)
    ]
    scored.sort(key=lambda item: item[2].overall_score, reverse=True)

    logger.info(
        "candidate_matches_computed",
        extra={"population": len(others), "scored": len(scored), "limit": limit},
    )
    return [
        CandidateMatch(
            subject_id=candidate_id,
            compatibility=result,
            taste_highlights=extract_taste_highlights(
                subject, library, favorite_threshold=favorite_threshold
            ),
        )
        for candidate_id, library, result in scored[:limit]
    ]
