"""Fixed SDK constants shared by configuration and the core components."""

DEFAULT_REMOTE_URL = "https://api.multibase.co/v1"

# Quiet period after the most recent track() before the batch is flushed.
DEFAULT_DEBOUNCE_SECONDS = 1.0

# Both persistence backends store the identity under the same key.
IDENTITY_KEY = "multibase_user_id"
IDENTITY_EXPIRY_DAYS = 365

TRACK_PATH = "event/track"
IDENTIFY_PATH = "user/identify"

API_KEY_HEADER = "x-api-key"

# Lowercase substrings; a match anywhere in the user agent suppresses tracking.
BLOCKED_USER_AGENTS = (
    "bot",
    "crawler",
    "spider",
    "crawling",
    "headlesschrome",
    "phantomjs",
    "slurp",
    "facebookexternalhit",
    "lighthouse",
    "prerender",
)
