# constants.py
# Centralized defaults. Values in leagues.yaml or SLEEPER_* env vars win over these.

DEFAULT_BASE_URL = "https://api.sleeper.app/v1"
AVATAR_THUMB_URL = "https://sleepercdn.com/avatars/thumbs/{avatar_id}"
USER_AGENT = "ffboard/1.0"
REQUEST_TIMEOUT_SEC = 20

# Week bounds for the regular NFL calendar
MIN_WEEK = 1
MAX_WEEK = 18

# Request coordination
DEFAULT_MIN_INTERVAL_SEC = 0.05
DEFAULT_CACHE_TTL_SEC = 600.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_BASE_SEC = 1.0

# TV mode
DEFAULT_ROTATION_SEC = 15.0
DEFAULT_LOAD_TIMEOUT_SEC = 10.0
DEFAULT_RETRY_DELAY_SEC = 5.0
DEFAULT_MAX_DISPLAY_RETRIES = 3

# Projections
TRAILING_WEEKS = 3
MIN_HISTORY_WEEKS = 2
NEUTRAL_PROJECTION = 0.0

# Guillotine display
SAFETY_PCT_MIN = 5.0
SAFETY_PCT_MAX = 95.0
SAFETY_PCT_UNKNOWN = 50.0
FIELD_PLACEHOLDER_BASE = 999

# League formats
FORMAT_H2H = "h2h"
FORMAT_GUILLOTINE = "guillotine"
FORMAT_PICKEM = "pickem"
FORMAT_SURVIVOR = "survivor"
POOL_FORMATS = frozenset({FORMAT_PICKEM, FORMAT_SURVIVOR})
DISPLAY_FORMATS = frozenset({FORMAT_H2H, FORMAT_GUILLOTINE})
