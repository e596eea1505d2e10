"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_DAYS = 30
DEFAULT_QR_TOKEN_TTL_SECONDS = 300
DEFAULT_STALE_SESSION_HOURS = 24
DEFAULT_SESSION_SWEEP_SECONDS = 60 * 60

ROOT_ADMIN_CODE = "ADMIN-001"
MIN_PASSWORD_LENGTH = 6

# External-facing account ID formats, keyed by role value.
USER_CODE_PATTERNS = {
    "student": (r"^\d{4}-\d{4}$", "YYYY-XXXX"),
    "instructor": (r"^T-\d{4}$", "T-YYYY"),
    "admin": (r"^ADMIN-\d{3}$", "ADMIN-XXX"),
}

QR_TOKEN_TYPE = "attendance"
