"""Global Flask extension instances and collaborator wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

if TYPE_CHECKING:
    from myroutine.infra.redis.redis_response_cache import RedisResponseCache
    from myroutine.services._shared.ports.email_sender import EmailSender
    from myroutine.services._shared.ports.image_store import ImageStore
    from myroutine.services._shared.ports.oauth_provider import OAuthProvider
    from myroutine.services._shared.ports.token_provider import TokenProvider

convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None

TOKEN_PROVIDER_KEY = "myroutine.token_provider"
IMAGE_STORE_KEY = "myroutine.image_store"
EMAIL_SENDER_KEY = "myroutine.email_sender"
OAUTH_PROVIDER_KEY = "myroutine.oauth_provider"
RESPONSE_CACHE_KEY = "myroutine.response_cache"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, Redis and outbound collaborators.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`myroutine.models` package to ensure SQLAlchemy metadata is ready
        for migrations.
    """
    db.init_app(app)

    from myroutine import models as _models  # noqa: F401

    migrate.init_app(app, db)

    _init_collaborators(app)
    _init_redis(app)


def _init_collaborators(app: Flask) -> None:
    from myroutine.infra.google.google_oauth_provider import GoogleOAuthProvider
    from myroutine.infra.jwt.jwt_token_provider import JWTTokenProvider

    app.extensions[TOKEN_PROVIDER_KEY] = JWTTokenProvider.from_config(app.config)
    app.extensions[OAUTH_PROVIDER_KEY] = GoogleOAuthProvider.from_config(app.config)

    if app.config.get("IMAGE_STORE_BACKEND") == "memory":
        from myroutine.services._shared.ports.image_store import InMemoryImageStore

        app.extensions[IMAGE_STORE_KEY] = InMemoryImageStore()
    else:
        from myroutine.infra.cloudinary.cloudinary_image_store import CloudinaryImageStore

        app.extensions[IMAGE_STORE_KEY] = CloudinaryImageStore.from_config(app.config)

    if app.config.get("EMAIL_BACKEND") == "memory":
        from myroutine.services._shared.ports.email_sender import InMemoryEmailSender

        app.extensions[EMAIL_SENDER_KEY] = InMemoryEmailSender()
    else:
        from myroutine.infra.sendgrid.sendgrid_email_sender import SendGridEmailSender

        app.extensions[EMAIL_SENDER_KEY] = SendGridEmailSender.from_config(app.config)


def _init_redis(app: Flask) -> None:
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        app.extensions.pop(RESPONSE_CACHE_KEY, None)
        return

    redis_client = redis.Redis.from_url(redis_url)
    try:
        redis_client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = redis_client

    from myroutine.infra.redis.redis_response_cache import RedisResponseCache

    app.extensions[RESPONSE_CACHE_KEY] = RedisResponseCache(
        redis_client, ttl=int(app.config.get("RESPONSE_CACHE_TTL", 60))
    )


def get_redis() -> redis.Redis:
    """Return the initialized Redis client."""
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client


def _extension(key: str) -> Any:
    try:
        return current_app.extensions[key]
    except KeyError as exc:
        raise RuntimeError(f"Extension {key!r} is not initialized. Call init_app() first.") from exc


def get_token_provider() -> TokenProvider:
    """Return the token provider bound to the current application."""
    return _extension(TOKEN_PROVIDER_KEY)


def get_image_store() -> ImageStore:
    """Return the image store bound to the current application."""
    return _extension(IMAGE_STORE_KEY)


def get_email_sender() -> EmailSender:
    """Return the email sender bound to the current application."""
    return _extension(EMAIL_SENDER_KEY)


def get_oauth_provider() -> OAuthProvider:
    """Return the Google OAuth client bound to the current application."""
    return _extension(OAUTH_PROVIDER_KEY)


def get_response_cache() -> RedisResponseCache | None:
    """Return the response cache, or ``None`` when Redis is not configured."""
    return current_app.extensions.get(RESPONSE_CACHE_KEY)
