# myroutine/services/session/service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import NoReturn

from myroutine.services._shared.base import BaseService, ServiceContext
from myroutine.services._shared.errors import (
    AuthenticationError,
    TokenError,
    TokenExpiredError,
)
from myroutine.services._shared.ports.token_provider import TokenProvider
from myroutine.services.session.dto import LogoutIn, SessionIn, SessionOut

log = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Decide whether a request's cookies identify a user, renewing on demand.

    State machine
    -------------
    1. No refresh token → reject before touching any store.
    2. Either presented token is in the invalid-token ledger → reject.
    3. A valid access token → accept, provided the user still exists.
       An access token that is merely expired counts as absent; any other
       access-token failure rejects.
    4. Otherwise renew from the refresh token: verify it, record it in the
       ledger (committed on its own), require it to equal the stored
       credential value, then swap in a new pair with a compare-and-set.
       Exactly one of two concurrent renewals with the same token wins.

    Every rejection raises :class:`AuthenticationError`; the HTTP layer
    answers 401 "Invalid authorization" and clears nothing.
    """

    def __init__(self, *, token_provider: TokenProvider, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Authenticate
    # ------------------------------------------------------------------ #

    def authenticate(self, dto: SessionIn) -> SessionOut:
        """
        Resolve the user behind a request.

        :param dto: Tokens read from cookies.
        :returns: The user id and, when renewal happened, the new pair.
        :raises AuthenticationError: On any rejection.
        """
        if not dto.refresh_token:
            self._reject("missing refresh token")

        presented = [t for t in (dto.access_token, dto.refresh_token) if t]
        with self.ro_uow() as uow:
            if uow.invalid_tokens.contains_any(presented):
                self._reject("token in invalid ledger")

        if dto.access_token:
            try:
                claims = self.tokens.verify_access(dto.access_token)
            except TokenExpiredError:
                claims = None
            except TokenError as exc:
                self._reject(f"access token rejected: {exc}")
            if claims is not None:
                user_id = int(claims["id_user"])
                with self.ro_uow() as uow:
                    if uow.users.get(user_id) is None:
                        self._reject("access token for unknown user")
                return SessionOut(user_id=user_id)

        return self._renew(dto.refresh_token)

    def _renew(self, refresh_token: str) -> SessionOut:
        try:
            claims = self.tokens.verify_refresh(refresh_token)
        except TokenError as exc:
            self._reject(f"refresh token rejected: {exc}")
        user_id = int(claims["id_user"])

        # Single use: the presented refresh token is burned whatever happens next.
        with self.rw_uow() as uow:
            if uow.users.get(user_id) is None:
                self._reject("refresh token for unknown user")
            uow.invalid_tokens.record(user_id, refresh_token)

        with self.rw_uow() as uow:
            credential = uow.credentials.find_by_user(user_id)
            if credential is None or credential.refresh_token != refresh_token:
                self._reject("refresh token does not match stored credential")
            pair = self.tokens.issue_tokens(user_id)
            if not uow.credentials.swap_refresh_token(
                user_id, expected=refresh_token, new=pair.refresh_token
            ):
                self._reject("concurrent renewal won the swap")

        log.info("Session renewed", extra={"user_id": user_id})
        return SessionOut(user_id=user_id, renewed=pair)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Invalidate the presented tokens and clear the stored refresh token.

        Both writes share one transaction.
        """
        with self.rw_uow() as uow:
            for token in (dto.access_token, dto.refresh_token):
                if token:
                    uow.invalid_tokens.record(dto.user_id, token)
            credential = uow.credentials.find_by_user(dto.user_id)
            if credential is not None:
                uow.credentials.update(
                    dto.user_id,
                    refresh_token=None,
                    reset_password_token=credential.reset_password_token,
                    reset_password_token_expires_at=credential.reset_password_token_expires_at,
                )
        log.info("Session closed", extra={"user_id": dto.user_id})

    # ------------------------------------------------------------------ #
    # Ledger maintenance
    # ------------------------------------------------------------------ #

    def purge_ledger(self, older_than: timedelta, *, now: datetime | None = None) -> int:
        """
        Delete ledger entries recorded more than ``older_than`` ago.

        Entries older than the refresh lifetime can no longer match a token
        that would otherwise verify, so purging them is safe.

        :returns: Number of entries deleted.
        """
        cutoff = (now or datetime.now(UTC)) - older_than
        with self.rw_uow() as uow:
            count = uow.invalid_tokens.purge_older_than(cutoff)
        log.info("Invalid-token ledger purged", extra={"count": count})
        return count

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _reject(reason: str) -> NoReturn:
        log.info("Session rejected", extra={"reason": reason})
        raise AuthenticationError(reason)
