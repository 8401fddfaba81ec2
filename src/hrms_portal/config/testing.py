import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("HRMS_API_URL", "http://api.test/api")
API_TIMEOUT = 2.0

LIVE_POLL_SECONDS = 3.0
CLOCK_TICK_SECONDS = 1.0

DEBUG = False
TESTING = True
