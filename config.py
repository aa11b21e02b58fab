import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _setting(key, default=None):
    """env.yaml first, then the environment, then the default.

    Environment values are strings; they are coerced to the default's type
    (comma separated for lists).
    """
    if key in data:
        return data[key]
    raw = os.environ.get(key)
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, list):
        return [item.strip() for item in raw.split(",") if item.strip()]
    return raw


class ApplicationConfig:
    DB_URI = _setting("DB_URI", "sqlite+aiosqlite:///./auth.db")
    API_PREFIX = _setting("API_PREFIX", "")
    API_PORT = _setting("API_PORT", 8000)
    API_HOST = _setting("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _setting("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _setting("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _setting("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(_setting("ENABLE_LOGGING_MIDDLEWARE", True))
    AUTO_CREATE_TABLES = bool(_setting("AUTO_CREATE_TABLES", False))
    ADMIN_API_KEY = _setting("ADMIN_API_KEY", "")

    # Tokens
    JWT_ISSUER = _setting("JWT_ISSUER", "solobueno-erp")
    JWT_AUDIENCE = _setting("JWT_AUDIENCE", ["solobueno-api"])
    JWT_KEY_ID = _setting("JWT_KEY_ID", "key-1")
    JWT_PRIVATE_KEY = _setting("JWT_PRIVATE_KEY", None)
    JWT_PRIVATE_KEY_FILE = _setting("JWT_PRIVATE_KEY_FILE", None)
    JWT_PUBLIC_KEY = _setting("JWT_PUBLIC_KEY", None)
    JWT_PUBLIC_KEY_FILE = _setting("JWT_PUBLIC_KEY_FILE", None)
    JWT_ALLOW_EPHEMERAL_KEY = bool(_setting("JWT_ALLOW_EPHEMERAL_KEY", False))
    ACCESS_TOKEN_TTL_MINUTES = _setting("ACCESS_TOKEN_TTL_MINUTES", 60)
    REFRESH_TOKEN_TTL_DAYS = _setting("REFRESH_TOKEN_TTL_DAYS", 30)

    # Rate limits
    LOGIN_RATE_LIMIT = _setting("LOGIN_RATE_LIMIT", 5)
    LOGIN_RATE_WINDOW_SECONDS = _setting("LOGIN_RATE_WINDOW_SECONDS", 60)
    RESET_RATE_LIMIT = _setting("RESET_RATE_LIMIT", 1)
    RESET_RATE_WINDOW_SECONDS = _setting("RESET_RATE_WINDOW_SECONDS", 300)

    # Passwords
    PASSWORD_RESET_TTL_MINUTES = _setting("PASSWORD_RESET_TTL_MINUTES", 60)
    ARGON2_MEMORY_COST = _setting("ARGON2_MEMORY_COST", 65536)
    ARGON2_TIME_COST = _setting("ARGON2_TIME_COST", 3)
    ARGON2_PARALLELISM = _setting("ARGON2_PARALLELISM", 4)

    AUDIT_RETENTION_DAYS = _setting("AUDIT_RETENTION_DAYS", 90)
