import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Backend REST API serving /api/hoa-don, /api/phong, ...
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "20"))

# List pages are cached per session for 5 minutes
CACHE_TTL_MS = int(os.getenv("CACHE_TTL_MS", "300000"))
FETCH_MAX_WORKERS = int(os.getenv("FETCH_MAX_WORKERS", "8"))
# "resource": also clear pages embedding the changed resource; "page": only the page itself
CACHE_INVALIDATION = os.getenv("CACHE_INVALIDATION", "resource")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True
