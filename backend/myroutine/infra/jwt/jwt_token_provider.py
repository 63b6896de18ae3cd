# myroutine/infra/jwt/jwt_token_provider.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from myroutine.services._shared.errors import InvalidSignatureError, TokenExpiredError
from myroutine.services._shared.ports.token_provider import (
    ACCESS,
    REFRESH,
    RESET,
    ResetToken,
    TokenPair,
    TokenProvider,
)


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    PyJWT-backed token provider.

    Access and reset tokens are signed with ``access_secret``; refresh tokens
    with ``refresh_secret``, so a token of one kind never verifies as the
    other. Every token carries ``id_user``, ``iat``, a random ``jti`` and its
    ``typ``; the ``jti`` keeps two tokens issued in the same second distinct.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=2)
    refresh_expires: timedelta = timedelta(days=7)
    reset_expires: timedelta = timedelta(minutes=10)
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JWTTokenProvider:
        return cls(
            access_secret=config["ACCESS_JWT_SECRET"],
            refresh_secret=config["REFRESH_JWT_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            reset_expires=config["RESET_PASSWORD_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def _encode(
        self, user_id: int, typ: str, secret: str, expires_delta: timedelta | None
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "id_user": int(user_id),
            "iat": int(now.timestamp()),
            "jti": uuid4().hex,
            "typ": typ,
        }
        if expires_delta is not None:
            payload["exp"] = int((now + expires_delta).timestamp())
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_tokens(self, user_id: int) -> TokenPair:
        return TokenPair(
            access_token=self._encode(user_id, ACCESS, self.access_secret, self.access_expires),
            refresh_token=self._encode(
                user_id, REFRESH, self.refresh_secret, self.refresh_expires
            ),
        )

    def issue_password_reset_token(self, user_id: int) -> ResetToken:
        # No exp claim: the credential row holds the expiry.
        token = self._encode(user_id, RESET, self.access_secret, None)
        return ResetToken(token=token, expires_at=datetime.now(UTC) + self.reset_expires)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify(self, token: str, secret: str, expected_type: str) -> dict[str, Any]:
        """
        Decode ``token`` and check its type.

        :raises TokenExpiredError: If the signature is valid but ``exp`` passed.
        :raises InvalidSignatureError: For any other verification failure.
        """
        required = ["id_user", "iat", "typ"]
        if expected_type != RESET:
            required.append("exp")
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": required},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError(f"{expected_type} token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidSignatureError(f"invalid {expected_type} token: {exc}") from exc

        if claims.get("typ") != expected_type:
            raise InvalidSignatureError(f"wrong token type: {claims.get('typ')!r}")
        if not isinstance(claims.get("id_user"), int):
            raise InvalidSignatureError("token subject is not a user id")
        return claims

    def verify_access(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.access_secret, ACCESS)

    def verify_refresh(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.refresh_secret, REFRESH)

    def verify_password_reset(self, token: str) -> dict[str, Any]:
        return self.verify(token, self.access_secret, RESET)
