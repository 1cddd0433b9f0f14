import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime, timedelta

from taste_engine import constants
from taste_engine.domain import LeaderboardPeriod, UserId, as_utc
from taste_engine.schemas.compatibility import CompatibilityResult
from taste_engine.schemas.library import LibraryEntry
from taste_engine.schemas.ranking import Leaderboard, RankedEntry, ScoredSubject

logger = logging.getLogger(__name__)


def sort_subjects(items: Iterable[ScoredSubject]) -> list[ScoredSubject]:
    # sorted() is stable with reverse=True: equal scores keep input order.
    return sorted(items, key=lambda item: item.score, reverse=True)


def rank_subjects(items: Iterable[ScoredSubject], limit: int | None = None) -> list[RankedEntry]:
    """Assigns contiguous 1-based ranks by descending score, optionally keeping the top K."""
    ordered = sort_subjects(items)
    if limit is not None:
        ordered = ordered[: max(limit, 0)]
    return [
        RankedEntry(rank=position, subject_id=item.subject_id, score=item.score, label=item.label)
        for position, item in enumerate(ordered, start=1)
    ]


def find_subject_rank(items: Iterable[ScoredSubject], subject_id: str) -> int | None:
    """
    Exact rank of a subject within the full population.

    The caller must pass the complete population: a pre-truncated list
    would misreport anyone outside the slice.
    """
    for position, item in enumerate(sort_subjects(items), start=1):
        if item.subject_id == subject_id:
            return position
    return None


def rank_compatibility(
    results: Iterable[tuple[UserId, CompatibilityResult]],
    limit: int | None = None,
    label: str = "mashscore",
) -> list[RankedEntry]:
    return rank_subjects(
        (
            ScoredSubject(subject_id=subject_id, score=result.overall_score, label=label)
            for subject_id, result in results
        ),
        limit=limit,
    )


def period_start(period: LeaderboardPeriod, now: datetime | None = None) -> datetime:
    now = as_utc(now) if now else datetime.now(UTC)
    if period == "monthly":
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if period == "weekly":
        return now - timedelta(days=7)
    return datetime(1970, 1, 1, tzinfo=UTC)


def count_activity(
    libraries: Mapping[UserId, Sequence[LibraryEntry]], since: datetime | None = None
) -> list[ScoredSubject]:
    """Number of library entries logged per subject at or after `since`."""
    since = as_utc(since) if since else None
    counts: Counter[UserId] = Counter()
    for subject_id, library in libraries.items():
        counts[subject_id] += sum(
            1 for entry in library if since is None or entry.timestamp >= since
        )
    return [
        ScoredSubject(subject_id=subject_id, score=float(count), label="ratings")
        for subject_id, count in counts.items()
        if count > 0
    ]


def build_leaderboard(
    libraries: Mapping[UserId, Sequence[LibraryEntry]],
    *,
    period: LeaderboardPeriod = "all_time",
    subject_id: UserId | None = None,
    now: datetime | None = None,
    limit: int = constants.LEADERBOARD_SIZE,
) -> Leaderboard:
    """Top raters over a recency window, plus the subject's exact rank in the population."""
    since = None if period == "all_time" else period_start(period, now)
    population = count_activity(libraries, since)

    entries = rank_subjects(population, limit=limit)
    subject_rank = find_subject_rank(population, subject_id) if subject_id else None

    logger.debug(
        "leaderboard_built",
        extra={"period": period, "population": len(population), "entries": len(entries)},
    )
    return Leaderboard(
        category="top_raters",
        period=period,
        entries=entries,
        subject_rank=subject_rank,
    )
