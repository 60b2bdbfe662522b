import os
from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import quote_plus


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _mariadb_url() -> str:
    """Build a MariaDB URL from the DB_* variables, or "" when DB_HOST is unset."""
    host = _getenv("DB_HOST")
    if not host:
        return ""
    user = quote_plus(_getenv("DB_USER", "root"))
    password = quote_plus(_getenv("DB_PASSWORD"))
    port = _getenv("DB_PORT", "3306")
    name = _getenv("DB_NAME", "alliance")
    creds = f"{user}:{password}" if password else user
    return f"mysql+pymysql://{creds}@{host}:{port}/{name}?charset=utf8mb4"


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development").lower(),
        database_url=_getenv("DATABASE_URL") or _mariadb_url() or "sqlite:///alliance.db",
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
    )


def is_production(env: str | None) -> bool:
    return (env or "").strip().lower() in ("prod", "production")


def load_config() -> dict:
    s = load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        # session cookie
        "SESSION_COOKIE_NAME": "__alliance_session",
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production(s.env),
        "SESSION_COOKIE_PATH": "/",
        "PERMANENT_SESSION_LIFETIME": timedelta(days=7),
        "SESSION_REFRESH_EACH_REQUEST": False,
        "MAX_CONTENT_LENGTH": 2 * 1024 * 1024,
    }
