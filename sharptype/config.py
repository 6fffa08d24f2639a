from pathlib import Path

APP_NAME = "SharpType"
DATA_DIR = Path.home() / ".sharptype"
PROGRESS_FILE = DATA_DIR / "progress.json"

# Metrics
CHARS_PER_WORD = 5

# Adaptive difficulty band (inclusive)
TARGET_ACCURACY_MIN = 80
TARGET_ACCURACY_MAX = 90

# Feedback
STAGNATION_WPM_DELTA = 2  # WPM change below this counts as no progress
STAGNATION_LIMIT = 3  # stagnant sessions before a critical remark
ENCOURAGE_ACCURACY = 90
ENCOURAGE_IMPROVEMENT = 5

# Spaced repetition
WEAK_KEY_LIMIT = 5
WEAK_KEY_PROBABILITY = 0.7
PSEUDO_WORD_MIN = 3
PSEUDO_WORD_MAX = 8
DEFAULT_PRACTICE_LENGTH = 100

# Results screen
CELEBRATE_ACCURACY = 90
CELEBRATE_WPM = 40
