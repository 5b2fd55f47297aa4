"""Internal constants shared across the library."""

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
ACCEPT_JSON = "application/json"
ACCEPT_LANGUAGE = "de-AT,de;q=0.9,en;q=0.8"

DETAIL_API_URL = "https://direktonline.motornetzwerk.at/app/php-wrappers/php-wrapper.php"

TEMPORARILY_UNAVAILABLE = "Vehicle data is temporarily unavailable. Please try again later."
STALE_WARNING = "Using cached data due to fetch error"

# ------------------------------------------------------------------
# Unit conversion (fixed factors, rounded half-up)
# ------------------------------------------------------------------

PS_TO_KW = 0.7355
KW_TO_PS = 1.36

# ------------------------------------------------------------------
# Plausibility bounds for scraped values
# ------------------------------------------------------------------

MIN_SCRAPED_PRICE = 1_000
MAX_SCRAPED_PRICE = 500_000
MIN_YEAR = 1970
MIN_TITLE_LENGTH = 3

# Vehicle ids accepted by the detail API: digits only, at most 10 chars.
MAX_VID_LENGTH = 10

# ------------------------------------------------------------------
# Markup windows (characters)
# ------------------------------------------------------------------

WINDOW_BEFORE_ID = 3_000
WINDOW_AFTER_ID = 2_000
PROXIMITY_IMAGE_DISTANCE = 5_000
MAX_LISTINGS_PER_PAGE = 12
