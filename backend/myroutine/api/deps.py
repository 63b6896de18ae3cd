"""Shared API helpers: envelopes, session cookies, response cache and timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, after_this_request, current_app, g, jsonify, make_response, request

from myroutine.core.extensions import get_response_cache, get_token_provider
from myroutine.core.logger import ensure_request_id
from myroutine.services._shared.base import ServiceContext
from myroutine.services._shared.ports.token_provider import TokenPair
from myroutine.services.session.dto import SessionIn
from myroutine.services.session.service import SessionService

F = TypeVar("F", bound=Callable[..., Any])

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def success(resource: Any, *, status: int = 200) -> Response:
    """Wrap ``resource`` in the success envelope ``{"success": true, "resource": ...}``."""

    return json_response({"success": True, "resource": resource}, status=status)


# --------------------------------------------------------------------------- #
# Session cookies
# --------------------------------------------------------------------------- #


def set_auth_cookies(response: Response, tokens: TokenPair) -> Response:
    """Attach both session cookies (HttpOnly, Secure/SameSite from config)."""

    cfg = current_app.config
    common = {
        "httponly": True,
        "secure": bool(cfg["AUTH_COOKIE_SECURE"]),
        "samesite": cfg["AUTH_COOKIE_SAMESITE"],
        "path": "/",
    }
    response.set_cookie(
        cfg["ACCESS_COOKIE_NAME"],
        tokens.access_token,
        max_age=int(cfg["ACCESS_TOKEN_EXPIRES"].total_seconds()),
        **common,
    )
    response.set_cookie(
        cfg["REFRESH_COOKIE_NAME"],
        tokens.refresh_token,
        max_age=int(cfg["REFRESH_TOKEN_EXPIRES"].total_seconds()),
        **common,
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    cfg = current_app.config
    for name in (cfg["ACCESS_COOKIE_NAME"], cfg["REFRESH_COOKIE_NAME"]):
        response.delete_cookie(
            name,
            path="/",
            secure=bool(cfg["AUTH_COOKIE_SECURE"]),
            httponly=True,
            samesite=cfg["AUTH_COOKIE_SAMESITE"],
        )
    return response


def session_tokens() -> SessionIn:
    """Read the access and refresh tokens presented as cookies."""

    cfg = current_app.config
    return SessionIn(
        access_token=request.cookies.get(cfg["ACCESS_COOKIE_NAME"]) or None,
        refresh_token=request.cookies.get(cfg["REFRESH_COOKIE_NAME"]) or None,
    )


def service_context() -> ServiceContext:
    """Build the service context for the current request."""

    return ServiceContext(actor_id=g.get("user_id"), request_id=ensure_request_id())


def require_session(func: F) -> F:
    """
    Authenticate the request from its cookies before running the view.

    On success ``g.user_id`` is set and ``g.live_tokens`` holds the tokens
    now valid for the session. When the session was renewed, the new pair is
    written to the response cookies, error responses included, unless the
    view ended the session by setting ``g.session_closed``. A successful mutating request
    drops the user's cached responses. Rejections surface as
    :class:`~myroutine.services._shared.errors.AuthenticationError` and end
    as 401 "Invalid authorization".
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.user_id = None
        g.session_closed = False
        presented = session_tokens()
        outcome = SessionService(
            token_provider=get_token_provider(),
            ctx=ServiceContext(request_id=ensure_request_id()),
        ).authenticate(presented)
        g.user_id = outcome.user_id
        g.live_tokens = (
            SessionIn(outcome.renewed.access_token, outcome.renewed.refresh_token)
            if outcome.renewed is not None
            else presented
        )

        if outcome.renewed is not None:
            renewed = outcome.renewed

            # Runs for error responses too; the presented refresh token is spent.
            @after_this_request
            def _write_renewed_cookies(response: Response) -> Response:
                if not g.get("session_closed"):
                    set_auth_cookies(response, renewed)
                return response

        response = make_response(func(*args, **kwargs))
        if request.method not in SAFE_METHODS and response.status_code < 400:
            cache = get_response_cache()
            if cache is not None:
                cache.invalidate_user(outcome.user_id)
        return response

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Response cache
# --------------------------------------------------------------------------- #


def cached(func: F) -> F:
    """
    Serve a GET view from the per-user Redis cache when available.

    Must sit below :func:`require_session` so ``g.user_id`` is known. Without
    a configured cache the view runs unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        cache = get_response_cache()
        user_id = g.get("user_id")
        if cache is None or user_id is None or request.method != "GET":
            return func(*args, **kwargs)

        path = request.full_path
        hit = cache.get(user_id, path)
        if hit is not None:
            return json_response(hit)

        response = make_response(func(*args, **kwargs))
        if response.status_code == 200 and response.is_json:
            cache.set(user_id, path, response.get_json())
        return response

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Instrumentation
# --------------------------------------------------------------------------- #


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
