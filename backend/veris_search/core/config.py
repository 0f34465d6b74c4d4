# veris_search/core/config.py
from __future__ import annotations
import os


def env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [p.strip() for p in raw.split(",") if p.strip()]


class Settings:
    # ---------------------------------------------------------
    # MongoDB
    # ---------------------------------------------------------
    mongo_uri = os.environ.get("MONGO_URI")
    # empty => database named in MONGO_URI, else "veris"
    mongo_db = os.environ.get("MONGO_DB", "")
    mongo_collection = os.environ.get("MONGO_COLLECTION", "veris_incidents")
    connect_timeout_ms = int(os.environ.get("CONNECT_TIMEOUT_MS", "5000"))
    query_timeout_ms = int(os.environ.get("QUERY_TIMEOUT_MS", "5000"))

    # "mongo" | "memory"
    store_backend = os.environ.get("STORE_BACKEND", "mongo").strip().lower()
    # JSON array or JSON-lines file, memory backend only
    seed_file = os.environ.get("SEED_FILE")

    # ---------------------------------------------------------
    # Search
    # ---------------------------------------------------------
    search_limit = int(os.environ.get("SEARCH_LIMIT", "50"))
    max_param_length = int(os.environ.get("MAX_PARAM_LENGTH", "256"))

    # ---------------------------------------------------------
    # HTTP
    # ---------------------------------------------------------
    port = int(os.environ.get("PORT", "3000"))
    cors_origins = env_list("CORS_ORIGINS", "*")
    static_dir = os.environ.get("STATIC_DIR", "public")
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    # ---------------------------------------------------------
    # Diagnostics (/__debug, /__distinct)
    # ---------------------------------------------------------
    debug_endpoints_enabled = env_bool("DEBUG_ENDPOINTS_ENABLED", True)
    # when set, callers must send X-API-Key with this value
    debug_api_key = os.environ.get("DEBUG_API_KEY")


settings = Settings()
