"""Application constants."""

# Session limits (template builder / live session)
MAX_EXERCISES_PER_TEMPLATE = 20
MAX_SETS_PER_EXERCISE = 10

# History and PR listings
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_RECORDS_LIMIT = 100

# Fallback name when a catalog entry is missing at session start
UNKNOWN_EXERCISE_NAME = "Exercise"
