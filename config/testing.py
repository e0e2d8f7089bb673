import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://backend.test")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "5"))

CACHE_TTL_MS = int(os.getenv("CACHE_TTL_MS", "300000"))
FETCH_MAX_WORKERS = int(os.getenv("FETCH_MAX_WORKERS", "4"))
CACHE_INVALIDATION = os.getenv("CACHE_INVALIDATION", "resource")

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

DEBUG = False
TESTING = True
