from collections import Counter, defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta, tzinfo

from taste_engine import constants
from taste_engine.domain import ConsumptionStyle, MediaType, RatingPattern, as_utc
from taste_engine.schemas.library import LibraryEntry
from taste_engine.schemas.profile import MonthlyRating, TasteProfile

RATING_BUCKETS: tuple[tuple[str, int, int], ...] = (
    ("1-2", 1, 2),
    ("3-4", 3, 4),
    ("5-6", 5, 6),
    ("7-8", 7, 8),
    ("9-10", 9, 10),
)


def _top_genres(counts: Counter[str], n: int = constants.TOP_GENRE_COUNT) -> list[str]:
    return [genre for genre, _ in counts.most_common(n)]


def _mean(values: Sequence[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def rating_pattern_for(average_rating: float) -> RatingPattern:
    if average_rating >= 7.5:
        return "generous"
    if average_rating >= 5.5:
        return "balanced"
    return "harsh"


def consumption_style_for(activity_score: float, diversity_score: float) -> ConsumptionStyle:
    if activity_score >= 7 and diversity_score >= 7:
        return "diverse_explorer"
    if activity_score >= 7:
        return "binge_watcher"
    if diversity_score >= 7:
        return "diverse_explorer"
    if activity_score >= 4:
        return "steady_reader"
    return "casual_enjoyer"


def _month_start(year: int, month: int, tz: tzinfo | None) -> datetime:
    # month may fall outside 1-12
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=tz)


def compute_rating_trend(
    library: Sequence[LibraryEntry],
    now: datetime,
    months: int = constants.RATING_TREND_MONTHS,
) -> list[MonthlyRating]:
    """Average rating per calendar month over the last `months` months, oldest first."""
    now = as_utc(now)
    trend: list[MonthlyRating] = []
    for offset in range(months - 1, -1, -1):
        start = _month_start(now.year, now.month - offset, now.tzinfo)
        end = _month_start(start.year, start.month + 1, now.tzinfo)
        ratings = [
            entry.rating
            for entry in library
            if entry.rating is not None and start <= entry.timestamp < end
        ]
        trend.append(MonthlyRating(month=start.strftime("%Y-%m"), avg=_mean(ratings)))
    return trend


def build_taste_profile(
    library: Sequence[LibraryEntry], now: datetime | None = None
) -> TasteProfile:
    """
    Summarizes one library: genre and media-type distributions, rating habits
    and recency-windowed activity. An empty library gives a zeroed profile.
    """
    now = as_utc(now) if now else datetime.now(UTC)
    total = len(library)
    ratings = [entry.rating for entry in library if entry.rating is not None]

    type_counts: Counter[MediaType] = Counter(entry.media_type for entry in library)
    genres_by_type: dict[MediaType, Counter[str]] = defaultdict(Counter)
    genres_overall: Counter[str] = Counter()
    for entry in library:
        genres_by_type[entry.media_type].update(entry.genres)
        genres_overall.update(entry.genres)

    distribution = {
        label: sum(1 for rating in ratings if low <= rating <= high)
        for label, low, high in RATING_BUCKETS
    }

    cutoff = now - timedelta(days=constants.RECENT_ACTIVITY_DAYS)
    recent = sum(1 for entry in library if entry.timestamp >= cutoff)

    average_rating = _mean(ratings)
    diversity_score = min(10.0, len(genres_overall) / constants.MAX_EXPECTED_GENRES * 10)
    activity_score = min(10.0, recent / total * 100) if total > 0 else 0.0

    most_active = type_counts.most_common(1)[0][0] if type_counts else None

    return TasteProfile(
        total_items=total,
        media_type_distribution=dict(type_counts),
        most_active_media_type=most_active,
        top_genres_by_type={
            media_type: _top_genres(counts) for media_type, counts in genres_by_type.items()
        },
        favorite_genres=_top_genres(genres_overall),
        average_rating=average_rating,
        rating_distribution=distribution,
        items_added_last_30_days=recent,
        genre_diversity_score=diversity_score,
        activity_score=activity_score,
        rating_pattern=rating_pattern_for(average_rating),
        consumption_style=consumption_style_for(activity_score, diversity_score),
        rating_trend=compute_rating_trend(library, now),
    )
