import os
from typing import List

DEFAULT_DATABASE_URL = (
    "postgresql://foundation_user:foundation_pass@db:5432/foundation_dev"
)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",  # React default
    "http://localhost:5173",  # Vite default
    "http://localhost:5174",  # Alternative Vite port
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

GENERIC_SERVER_ERROR = "Internal server error"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def sql_echo_enabled() -> bool:
    return os.getenv("SQL_ECHO", "false").lower() == "true"


def get_app_env() -> str:
    return os.getenv("APP_ENV", "development").lower()


def is_production() -> bool:
    return get_app_env() == "production"


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
