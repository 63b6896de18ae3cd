"""Free-text feedback left by users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from myroutine.core.extensions import db

from .base import PKMixin, ReprMixin, UserOwnedMixin


class Feedback(PKMixin, ReprMixin, UserOwnedMixin, db.Model):
    __tablename__ = "feedback"

    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
