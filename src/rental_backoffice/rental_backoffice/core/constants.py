"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_CACHE_TTL_MS = 300_000
DEFAULT_LIST_LIMIT = 100
DEFAULT_FETCH_MAX_WORKERS = 8
DEFAULT_API_TIMEOUT_SECONDS = 20.0

ID_FIELD = "_id"
FILTER_ALL = "all"
NOT_AVAILABLE = "N/A"

REFRESH_SUCCESS_MESSAGE = "Đã tải dữ liệu mới nhất"
