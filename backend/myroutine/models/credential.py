"""Per-user authentication record and the invalid-token ledger."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from myroutine.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UserOwnedMixin


class Credential(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One row per user holding the rotating refresh token and reset-token state.

    Fields
    ------
    user_id : int
        Owner; unique, so a user has at most one live refresh token.
    refresh_token : str | None
        Currently valid refresh token. Overwritten on every issuance.
    reset_password_token : str | None
        Outstanding password-reset token, cleared once used.
    reset_password_token_expires_at : datetime | None
        Authority for reset-token validity (the token itself has no ``exp``).
    """

    __tablename__ = "credentials"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    reset_password_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    reset_password_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (UniqueConstraint("user_id", name="uq_credentials_user_id"),)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InvalidToken(PKMixin, ReprMixin, UserOwnedMixin, db.Model):
    """
    Ledger entry for a token that must never be honored again.

    ``recorded_at`` is set in Python so retention purges can be exercised
    under a frozen clock.
    """

    __tablename__ = "invalid_tokens"

    token: Mapped[str] = mapped_column(String(1024), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        Index("ix_invalid_tokens_token", "token"),
        Index("ix_invalid_tokens_recorded_at", "recorded_at"),
    )
