"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_STUDENT_SCORE = 10
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_SCORE_UPDATE_ATTEMPTS = 5
DEFAULT_STORAGE_TIMEOUT_SECONDS = 5

PERCENTAGE_MIN = 0
PERCENTAGE_MAX = 100

QUIZ_ABSENT_MARKERS = ("Didn't Attend The Quiz", "No Quiz")
AUTO_REVERSED_BY_ATTENDANCE = "attendance"
