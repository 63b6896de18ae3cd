from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class OAuthProfile:
    """Identity returned by the OAuth provider after a code exchange."""

    email: str
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None


class OAuthProvider(Protocol):
    """Port for the Google authorization-code flow."""

    def authorization_url(self, state: str) -> str: ...

    def exchange_code(self, code: str) -> OAuthProfile: ...
