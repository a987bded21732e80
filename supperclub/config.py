import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
MEMORY_SQLITE_URL = "sqlite:///:memory:"


def normalize_database_url(raw_url: str, root: str = PROJECT_ROOT) -> str:
    """Accept Heroku-style postgres URLs and resolve relative SQLite paths against ``root``."""
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    if raw_url.startswith("sqlite:///") and not raw_url.startswith("sqlite:////") and raw_url != MEMORY_SQLITE_URL:
        absolute_path = os.path.join(root, raw_url.replace("sqlite:///", "", 1))
        return f"sqlite:///{absolute_path}"
    return raw_url


def engine_options_for(database_url: str, options=None, busy_timeout=30):
    engine_options = dict(options or {})
    if database_url.startswith("sqlite:"):
        connect_args = dict(engine_options.get("connect_args") or {})
        connect_args.setdefault("timeout", busy_timeout)
        engine_options["connect_args"] = connect_args
    return engine_options


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-unsafe-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///instance/supperclub.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}
    # Seconds a SQLite writer waits for the database lock.
    SQLITE_BUSY_TIMEOUT = int(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))

    # Payout previews are pure functions of their query string.
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "300"))

    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per day;80 per hour")
    RATELIMIT_HEADERS_ENABLED = True
    REFERRAL_VALIDATE_LIMIT = os.getenv("REFERRAL_VALIDATE_LIMIT", "30 per minute")
    REFERRAL_CODE_MAX_ATTEMPTS = int(os.getenv("REFERRAL_CODE_MAX_ATTEMPTS", "10"))

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    SENTRY_DSN = os.getenv("SENTRY_DSN")
    SENTRY_ENVIRONMENT = os.getenv("FLASK_ENV", "production")
    SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.05"))
    CREATE_TABLES = False


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SESSION_COOKIE_SECURE = False
    CREATE_TABLES = True


class ProductionConfig(BaseConfig):
    DEBUG = False
    SESSION_COOKIE_SECURE = True


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = MEMORY_SQLITE_URL
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CACHE_TYPE = "NullCache"
    RATELIMIT_DEFAULT = "10000 per hour"
    REFERRAL_VALIDATE_LIMIT = "1000 per minute"
    SENTRY_DSN = None
    CREATE_TABLES = True


config_by_env = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
