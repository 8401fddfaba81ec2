"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOKEN_STORAGE_KEY = "hrms_token"

LOGIN_PATH = "/login"
ROOT_PATH = "/"

CLOCK_TICK_SECONDS = 1.0
LIVE_POLL_SECONDS = 3.0

DEFAULT_PAGE_LIMIT = 10
DEFAULT_API_TIMEOUT = 10.0

LOGIN_FAILED_MESSAGE = "Login failed"
REQUEST_FAILED_MESSAGE = "Request failed"
NETWORK_ERROR_MESSAGE = "Unable to reach the server"
