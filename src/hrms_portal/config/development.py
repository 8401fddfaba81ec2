import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Base URL of the HRMS REST API, read once at startup
API_BASE_URL = os.getenv("HRMS_API_URL", "http://localhost:5000/api")
API_TIMEOUT = float(os.getenv("HRMS_API_TIMEOUT", "10"))

LIVE_POLL_SECONDS = float(os.getenv("LIVE_POLL_SECONDS", "3"))
CLOCK_TICK_SECONDS = 1.0

DEBUG = True
