"""Internal constants shared across the library."""

BASE_URL = "https://api.apnirc.xyz"
LOOKUP_ENDPOINT = "/api/b2b/get-rc"
USER_AGENT = "rclookup/1"

#: Fixed per-lookup charge in rupees.
DEFAULT_LOOKUP_COST = 5

MIN_TOPUP = 1
MAX_TOPUP = 10_000

DEFAULT_PAGE_SIZE = 10
DEFAULT_TIME_ZONE = "Asia/Kolkata"

# ------------------------------------------------------------------
# Persisted key layout
# ------------------------------------------------------------------

BALANCE_KEY = "balance"
TRANSACTIONS_KEY = "transactions"
RECORD_KEY_PREFIX = "rc_"

# ------------------------------------------------------------------
# Rendering placeholders
# ------------------------------------------------------------------

DOCUMENT_PLACEHOLDER = "N/A"
TABLE_PLACEHOLDER = "-"
CSV_HEADER: tuple[str, ...] = ("Date", "Type", "Vehicle Number", "Amount", "Cost")

# Locale-independent month abbreviations (en-IN short month names).
MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
