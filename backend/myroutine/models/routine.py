"""Routine aggregate: routines, their exercises and their scheduled days."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from myroutine.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UserOwnedMixin


class Routine(PKMixin, ReprMixin, TimestampMixin, UserOwnedMixin, db.Model):
    """
    Ordered collection of exercises a user performs together.

    Fields
    ------
    name : str
        Display name.
    description : str
        Free-form notes.
    time_before_start : str | None
        Warm-up countdown, e.g. ``"10 seconds"``.
    usage_count : int
        How many times the routine was started.
    is_favorite : bool
        User flag used for filtering.
    """

    __tablename__ = "routines"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time_before_start: Mapped[str | None] = mapped_column(String(50), nullable=True)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class ComposedBy(UserOwnedMixin, db.Model):
    """Membership of an exercise in a routine, with its position."""

    __tablename__ = "composed_by"

    routine_id: Mapped[int] = mapped_column(ForeignKey("routines.id"), primary_key=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), primary_key=True)
    exercise_order: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Day(PKMixin, ReprMixin, db.Model):
    """Fixed catalog of weekdays (seeded via ``flask catalog seed``)."""

    __tablename__ = "days"

    name: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_days_name"),)


class ScheduledDay(UserOwnedMixin, db.Model):
    """A routine scheduled on a weekday."""

    __tablename__ = "scheduled_days"

    routine_id: Mapped[int] = mapped_column(ForeignKey("routines.id"), primary_key=True)
    day_id: Mapped[int] = mapped_column(ForeignKey("days.id"), primary_key=True)
