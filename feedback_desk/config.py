import os

from sqlalchemy.engine import URL


def _env_bool(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> tuple:
    raw = os.getenv(name, default) or ""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _database_url() -> str:
    """DATABASE_URL wins; otherwise the MYSQL_* variables of the legacy deployment; otherwise local SQLite."""
    try:
        from dotenv import dotenv_values
        _env_fallback = dotenv_values(".env")
    except OSError:
        _env_fallback = {}
    url = os.environ.get("DATABASE_URL") or _env_fallback.get("DATABASE_URL")
    if url:
        return url
    if os.environ.get("MYSQL_HOST"):
        return URL.create(
            "mysql+pymysql",
            username=os.environ.get("MYSQL_USER", "root"),
            password=os.environ.get("MYSQL_PASSWORD") or None,
            host=os.environ["MYSQL_HOST"],
            port=int(os.environ.get("MYSQL_PORT", "3306")),
            database=os.environ.get("MYSQL_DATABASE", "feedback"),
            query={"charset": "utf8mb4"},
        ).render_as_string(hide_password=False)
    return "sqlite:///feedback.db"


class BaseConfig:
    APP_ENV = os.environ.get("APP_ENV", "development").lower()

    # Secrets: no defaults outside testing, create_app refuses to start without them
    SECRET_KEY = os.environ.get("SECRET_KEY") or os.environ.get("JWT_SECRET")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
    ADMIN_TOKEN_SALT = os.environ.get("ADMIN_TOKEN_SALT", "admin-token-v1")

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_POOL_SIZE = int(os.environ.get("DB_POOL_SIZE", "10"))
    DB_POOL_TIMEOUT = float(os.environ.get("DB_POOL_TIMEOUT", "10"))
    # Schema comes from `flask db upgrade` (or `flask feedback init-db`); create_all at boot
    # would pre-empt the first Alembic revision.
    DB_AUTO_CREATE = _env_bool("DB_AUTO_CREATE")

    # Rate limiting
    SUBMIT_RATE_LIMIT = os.environ.get("SUBMIT_RATE_LIMIT", "10 per 10 minutes")
    RATELIMIT_EXEMPT_IPS = _env_list("RATELIMIT_EXEMPT_IPS")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL") or "memory://"
    RATELIMIT_ENABLED = True
    RATELIMIT_HEADERS_ENABLED = True
    LOGIN_RATE_LIMIT = os.environ.get("LOGIN_RATE_LIMIT", "10 per minute; 100 per hour")

    # Client identity: number of reverse proxies whose X-Forwarded-For we trust
    TRUSTED_PROXY_COUNT = int(os.environ.get("TRUSTED_PROXY_COUNT", "0"))
    FORCE_HTTPS = _env_bool("FORCE_HTTPS", "true")

    # Feedback rules
    STRICT_SUBMISSIONS = _env_bool("STRICT_SUBMISSIONS")
    FEEDBACK_TYPES = _env_list("FEEDBACK_TYPES", "praise,complaint,suggestion")
    INSTITUTION_TIMEZONE = os.environ.get("INSTITUTION_TIMEZONE", "Asia/Shanghai")

    # Logging / misc
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    PORT = int(os.environ.get("PORT", "8080"))
    JSON_SORT_KEYS = False


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SECRET_KEY = os.environ.get("SECRET_KEY", "test-signing-key")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "test-admin-secret")
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_ENABLED = False
    DB_AUTO_CREATE = True


_ENV_MAP = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "staging": ProductionConfig,
    "testing": TestingConfig,
}


def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
