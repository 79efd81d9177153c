"""Application-wide constants.

These are fixed values that don't change between environments.
For configurable values, see config.py Settings.
"""

# ─────────────────────────────────────────────────────────────
# Calendar layout
# ─────────────────────────────────────────────────────────────
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
TRADING_DAYS = WEEKDAY_NAMES[:5]  # Week buckets are seeded with these only
WEEKEND_ROLL_FORWARD_DAYS = 7

# ─────────────────────────────────────────────────────────────
# Favorites
# ─────────────────────────────────────────────────────────────
FAVORITES_STORAGE_KEY = "favorites"  # Single key holding a JSON array of tickers

# ─────────────────────────────────────────────────────────────
# Cache TTLs
# ─────────────────────────────────────────────────────────────
NASDAQ_CACHE_TTL_EARNINGS = 21600  # 6 hours for earnings calendar
CACHE_PREFIX = "earncal"

# ─────────────────────────────────────────────────────────────
# Defaults (used in Settings)
# ─────────────────────────────────────────────────────────────
DEFAULT_CALENDAR_TIMEZONE = "America/New_York"  # US market calendar
DEFAULT_IDENTITY_HEADER = "X-User-Id"
DEFAULT_API_BASE_URL = "http://localhost:8000"
NASDAQ_API_URL = "https://api.nasdaq.com/api"
