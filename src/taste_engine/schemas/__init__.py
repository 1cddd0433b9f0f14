from taste_engine.schemas.compatibility import (
    DEFAULT_WEIGHTS,
    CandidateMatch,
    CompatibilityInsight,
    CompatibilityResult,
    ScoringWeights,
    SimilarFavorite,
    TasteHighlights,
)
from taste_engine.schemas.library import LibraryEntry, MediaCatalog, MediaMetadata, UserMediaRecord
from taste_engine.schemas.mood import Mood
from taste_engine.schemas.profile import TasteProfile
from taste_engine.schemas.ranking import Leaderboard, RankedEntry, ScoredSubject
from taste_engine.schemas.recommendation import BasedOn, MediaItem, Recommendation, RecommendedItem

__all__ = [
    "DEFAULT_WEIGHTS",
    "BasedOn",
    "CandidateMatch",
    "CompatibilityInsight",
    "CompatibilityResult",
    "Leaderboard",
    "LibraryEntry",
    "MediaCatalog",
    "MediaItem",
    "MediaMetadata",
    "Mood",
    "RankedEntry",
    "Recommendation",
    "RecommendedItem",
    "ScoredSubject",
    "ScoringWeights",
    "SimilarFavorite",
    "TasteHighlights",
    "TasteProfile",
    "UserMediaRecord",
]
