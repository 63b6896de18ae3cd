# myroutine/services/session/dto.py
from __future__ import annotations

from dataclasses import dataclass

from myroutine.services._shared.ports.token_provider import TokenPair


@dataclass(frozen=True, slots=True)
class SessionIn:
    """
    Tokens presented by a request, as read from its cookies.

    :param access_token: Access token, or ``None`` when the cookie is absent.
    :param refresh_token: Refresh token, or ``None`` when the cookie is absent.
    """

    access_token: str | None = None
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    Outcome of a successful authentication.

    :param user_id: Authenticated user.
    :param renewed: New token pair when the session was renewed; the caller
        must replace both cookies with it.
    """

    user_id: int
    renewed: TokenPair | None = None


@dataclass(frozen=True, slots=True)
class LogoutIn:
    user_id: int
    access_token: str | None = None
    refresh_token: str | None = None
