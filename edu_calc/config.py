# Service configuration read from the environment
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))

# Comma separated list; "*" allows every origin
CORS_ALLOW_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()]

# Calculations slower than this are logged as warnings
SLOW_CALCULATION_SECONDS = float(os.getenv("SLOW_CALCULATION_SECONDS", 1.0))

# Number of recent calculation records kept for timing percentiles
PERFORMANCE_HISTORY_SIZE = int(os.getenv("PERFORMANCE_HISTORY_SIZE", 1000))
