from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

ACCESS = "access"
REFRESH = "refresh"
RESET = "reset"


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Freshly issued access and refresh tokens for one user."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class ResetToken:
    """
    Password-reset token plus its server-side expiry.

    The token carries no ``exp`` claim; ``expires_at`` is stored with the
    credential record and is the sole authority for validity.
    """

    token: str
    expires_at: datetime


class TokenProvider(Protocol):
    """Port for issuing and verifying signed session tokens.

    Verification raises :class:`~myroutine.services._shared.errors.TokenExpiredError`
    for an expired but otherwise valid token and
    :class:`~myroutine.services._shared.errors.InvalidSignatureError` for
    anything else (bad signature, wrong secret, wrong type, malformed).
    """

    def issue_tokens(self, user_id: int) -> TokenPair: ...

    def verify_access(self, token: str) -> dict[str, Any]: ...

    def verify_refresh(self, token: str) -> dict[str, Any]: ...

    def issue_password_reset_token(self, user_id: int) -> ResetToken: ...

    def verify_password_reset(self, token: str) -> dict[str, Any]: ...
