# Composite MashScore weights. The shared-item weight has no cap of its own.
SHARED_ITEM_WEIGHT = 2.0
GENRE_OVERLAP_WEIGHT = 30.0
RATING_CORRELATION_WEIGHT = 30.0
PER_TYPE_WEIGHT = 0.1

MAX_SCORE = 100.0
RATING_SCALE = 10

FAVORITE_RATING_THRESHOLD = 8
MOOD_BONUS_PER_GENRE = 10.0
DEFAULT_RESULT_LIMIT = 20

TOP_GENRE_COUNT = 10
SHARED_GENRES_LIMIT = 10
SIMILAR_FAVORITES_LIMIT = 5
CANDIDATE_MATCH_LIMIT = 50
LEADERBOARD_SIZE = 100

# Taste profile scaling
MAX_EXPECTED_GENRES = 50
RECENT_ACTIVITY_DAYS = 30
RATING_TREND_MONTHS = 6
CLOSE_RATING_DELTA = 1
