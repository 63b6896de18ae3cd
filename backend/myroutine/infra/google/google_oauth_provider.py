# myroutine/infra/google/google_oauth_provider.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import requests

from myroutine.services._shared.errors import ExternalServiceError
from myroutine.services._shared.ports.oauth_provider import OAuthProfile, OAuthProvider

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "email", "profile")


class GoogleOAuthProvider(OAuthProvider):
    """Authorization-code flow against Google's OAuth 2.0 endpoints."""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> GoogleOAuthProvider:
        return cls(
            client_id=config.get("GOOGLE_CLIENT_ID", ""),
            client_secret=config.get("GOOGLE_CLIENT_SECRET", ""),
            redirect_uri=config.get("GOOGLE_REDIRECT_URI", ""),
            timeout=float(config.get("HTTP_TIMEOUT", 10)),
        )

    def authorization_url(self, state: str) -> str:
        query = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{AUTH_URL}?{urlencode(query)}"

    def exchange_code(self, code: str) -> OAuthProfile:
        """
        Trade an authorization code for the user's profile.

        :raises ExternalServiceError: When Google rejects the code or the
            profile lacks an email.
        """
        try:
            r = requests.post(
                TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
                timeout=self.timeout,
            )
            if r.status_code != 200:
                raise ExternalServiceError("google_oauth", f"token exchange HTTP {r.status_code}")
            access_token = (r.json() or {}).get("access_token")
            if not access_token:
                raise ExternalServiceError("google_oauth", "no access_token in response")

            info = requests.get(
                USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ExternalServiceError("google_oauth", "request failed") from exc

        if info.status_code != 200:
            raise ExternalServiceError("google_oauth", f"userinfo HTTP {info.status_code}")
        data = info.json() or {}
        email = (data.get("email") or "").strip()
        if not email:
            raise ExternalServiceError("google_oauth", "profile has no email")
        return OAuthProfile(
            email=email,
            given_name=data.get("given_name"),
            family_name=data.get("family_name"),
            picture=data.get("picture"),
        )
