"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_FEE = 900
DEFAULT_TSHIRT_LIMIT = 100
DEFAULT_SCAN_MIN_INTERVAL_SECONDS = 2.0
DEFAULT_NUMBER_RETRIES = 3
DEFAULT_HISTORY_LIMIT = 15

# Bare identifiers at or above this length are treated as noise, not IDs.
BARE_ID_MAX_LENGTH = 50

# Expected fee per walk-in category.
WALK_IN_FEES = {
    "campista": 900,
    "pastor": 600,
    "ujier": 700,
    "multimedia": 700,
    "registro": 700,
}

TSHIRT_SIZES = ("XS", "S", "M", "L", "XL", "XXL")
