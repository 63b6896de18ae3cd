"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for the signed session cookie (OAuth ``state``).
    ACCESS_JWT_SECRET: str
        HMAC secret for access tokens and password-reset tokens.
    REFRESH_JWT_SECRET: str
        HMAC secret for refresh tokens. Must differ from the access secret.
    ACCESS_TOKEN_EXPIRES, REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes, also used as cookie ``max_age``.
    RESET_PASSWORD_TOKEN_EXPIRES: timedelta
        Validity window stored next to a reset token in the credential row.
    INVALID_TOKEN_RETENTION: timedelta
        Age after which ledger entries can be purged.
    AUTH_COOKIE_SECURE, AUTH_COOKIE_SAMESITE:
        Attributes applied to both session cookies.
    IMAGE_STORE_BACKEND: str
        ``"cloudinary"`` or ``"memory"``.
    EMAIL_BACKEND: str
        ``"sendgrid"`` or ``"memory"``.
    REDIS_URL: str | None
        Enables the response cache when set.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    APP_COMMIT = os.getenv("APP_COMMIT", "unknown")

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    ACCESS_JWT_SECRET = os.getenv("ACCESS_JWT_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_JWT_SECRET = os.getenv("REFRESH_JWT_SECRET", "CHANGE_ME_REFRESH")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=env_int("ACCESS_TOKEN_EXPIRES_SECONDS", 120))
    REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_EXPIRES_DAYS", 7))
    RESET_PASSWORD_TOKEN_EXPIRES = timedelta(minutes=10)
    INVALID_TOKEN_RETENTION = REFRESH_TOKEN_EXPIRES

    # Cookies
    ACCESS_COOKIE_NAME = "access_token"
    REFRESH_COOKIE_NAME = "refresh_token"
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "None")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXY_HOPS = env_int("PROXY_HOPS", 1)

    # Frontend links (redirects, reset emails)
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Profile photo placeholder shipped with every new account
    DEFAULT_PROFILE_PHOTO_ID = os.getenv("DEFAULT_PROFILE_PHOTO_ID", "default_bx6tka")
    DEFAULT_PROFILE_PHOTO_URL = os.getenv(
        "DEFAULT_PROFILE_PHOTO_URL",
        "https://res.cloudinary.com/demo/image/upload/default_bx6tka.png",
    )

    # Outbound collaborators
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
    IMAGE_STORE_BACKEND = os.getenv("IMAGE_STORE_BACKEND", "cloudinary")
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "myroutine")
    EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "sendgrid")
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "no-reply@myroutine.app")
    GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_REDIRECT_URI = os.getenv(
        "GOOGLE_REDIRECT_URI", "http://localhost:3000/api/v1/user/google/redirect"
    )

    # Response cache
    REDIS_URL = os.getenv("REDIS_URL") or None
    RESPONSE_CACHE_TTL = env_int("RESPONSE_CACHE_TTL", 60)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode and plain-HTTP cookies so the frontend dev server can
    authenticate without TLS.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Swaps outbound collaborators for in-memory doubles.
    """

    TESTING = True
    DEBUG = False
    SECRET_KEY = "testing-secret"
    ACCESS_JWT_SECRET = "testing-access-secret"
    REFRESH_JWT_SECRET = "testing-refresh-secret"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = True
    AUTH_COOKIE_SECURE = False
    AUTH_COOKIE_SAMESITE = "Lax"
    USE_PROXYFIX = False
    IMAGE_STORE_BACKEND = "memory"
    EMAIL_BACKEND = "memory"
    GOOGLE_CLIENT_ID = "testing-client"
    GOOGLE_CLIENT_SECRET = "testing-client-secret"
    REDIS_URL = None


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    AUTH_COOKIE_SECURE = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
