"""Credential store and invalid-token ledger repositories."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select, update

from myroutine.models.credential import Credential, InvalidToken

from .base import BaseRepository, UserScopedRepository


class CredentialRepository(BaseRepository[Credential]):
    """
    One authentication record per user.

    ``update`` overwrites the whole record; callers read, modify and write
    back. ``swap_refresh_token`` is the only partial write and is conditional
    on the currently stored value.
    """

    model = Credential

    def create(
        self,
        user_id: int,
        *,
        refresh_token: str | None = None,
        reset_password_token: str | None = None,
        reset_password_token_expires_at: datetime | None = None,
    ) -> Credential:
        return self.add(
            Credential(
                user_id=user_id,
                refresh_token=refresh_token,
                reset_password_token=reset_password_token,
                reset_password_token_expires_at=reset_password_token_expires_at,
            )
        )

    def find_by_user(self, user_id: int) -> Credential | None:
        stmt = select(Credential).where(Credential.user_id == user_id)
        return self.session.execute(stmt).scalars().first()

    def update(
        self,
        user_id: int,
        *,
        refresh_token: str | None,
        reset_password_token: str | None,
        reset_password_token_expires_at: datetime | None,
    ) -> int:
        """Overwrite every mutable field of the user's record.

        :returns: Number of rows written (``0`` when the record is missing).
        """
        stmt = (
            update(Credential)
            .where(Credential.user_id == user_id)
            .values(
                refresh_token=refresh_token,
                reset_password_token=reset_password_token,
                reset_password_token_expires_at=reset_password_token_expires_at,
            )
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def swap_refresh_token(self, user_id: int, *, expected: str, new: str) -> bool:
        """Replace the refresh token only if it still equals ``expected``.

        Two concurrent renewals presenting the same token race on this
        statement; exactly one of them sees a row count of ``1``.
        """
        stmt = (
            update(Credential)
            .where(Credential.user_id == user_id, Credential.refresh_token == expected)
            .values(refresh_token=new)
            .execution_options(synchronize_session="fetch")
        )
        return (self.session.execute(stmt).rowcount or 0) == 1

    def delete_by_user(self, user_id: int) -> int:
        return self.delete_where(Credential.user_id == user_id)


class InvalidTokenRepository(UserScopedRepository[InvalidToken]):
    """Append-only ledger of tokens that must be rejected."""

    model = InvalidToken

    def record(self, user_id: int, token: str) -> InvalidToken:
        return self.add(InvalidToken(user_id=user_id, token=token))

    def contains(self, token: str) -> bool:
        return self.exists(token=token)

    def contains_any(self, tokens: Iterable[str]) -> bool:
        values = [t for t in tokens if t]
        if not values:
            return False
        stmt = select(InvalidToken.id).where(InvalidToken.token.in_(values)).limit(1)
        return self.session.execute(stmt).first() is not None

    def purge_older_than(self, cutoff: datetime) -> int:
        """Delete entries recorded before ``cutoff``; return the row count."""
        return self.delete_where(InvalidToken.recorded_at < cutoff)
