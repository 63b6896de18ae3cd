"""Exercise aggregate: exercises, their sets, muscle-group links and photos."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from myroutine.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UserOwnedMixin

INTENSITY_LOW, INTENSITY_MID, INTENSITY_HIGH = 1, 2, 3


class Exercise(PKMixin, ReprMixin, TimestampMixin, UserOwnedMixin, db.Model):
    """
    User-defined exercise.

    Fields
    ------
    name : str
        Display name.
    description : str
        Free-form instructions.
    time_after_exercise : str
        Rest after the whole exercise, e.g. ``"2 minutes"``.
    intensity : int
        ``1`` (low), ``2`` (mid) or ``3`` (high).
    is_favorite : bool
        User flag used for filtering.
    """

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    time_after_exercise: Mapped[str] = mapped_column(String(50), nullable=False)
    intensity: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (CheckConstraint("intensity BETWEEN 1 AND 3", name="intensity_range"),)


class Set(PKMixin, ReprMixin, UserOwnedMixin, db.Model):
    """
    One set of an exercise. Exactly one of ``time_set``/``repetition_set``
    describes its quantity.
    """

    __tablename__ = "sets"

    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id"), nullable=False, index=True
    )
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    rest_after_set: Mapped[str | None] = mapped_column(String(50), nullable=True)
    set_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    time_set: Mapped[TimeSet | None] = relationship(
        "TimeSet", uselist=False, viewonly=True, lazy="selectin"
    )
    repetition_set: Mapped[RepetitionSet | None] = relationship(
        "RepetitionSet", uselist=False, viewonly=True, lazy="selectin"
    )

    @property
    def kind(self) -> str | None:
        if self.time_set is not None:
            return "time"
        if self.repetition_set is not None:
            return "repetition"
        return None

    @property
    def quantity(self) -> str | int | None:
        if self.time_set is not None:
            return self.time_set.duration
        if self.repetition_set is not None:
            return self.repetition_set.repetitions
        return None


class TimeSet(UserOwnedMixin, db.Model):
    """Duration-based quantity of a set, e.g. ``"30 seconds"``."""

    __tablename__ = "time_sets"

    set_id: Mapped[int] = mapped_column(ForeignKey("sets.id"), primary_key=True)
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id"), nullable=False, index=True
    )
    duration: Mapped[str] = mapped_column(String(50), nullable=False)


class RepetitionSet(UserOwnedMixin, db.Model):
    """Repetition-based quantity of a set."""

    __tablename__ = "repetition_sets"

    set_id: Mapped[int] = mapped_column(ForeignKey("sets.id"), primary_key=True)
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id"), nullable=False, index=True
    )
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (CheckConstraint("repetitions > 0", name="repetitions_positive"),)


class MuscleGroup(PKMixin, ReprMixin, db.Model):
    """Fixed catalog of muscle groups (seeded via ``flask catalog seed``)."""

    __tablename__ = "muscle_groups"

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_muscle_groups_name"),)


class WorksOn(UserOwnedMixin, db.Model):
    """Link between an exercise and a muscle group it trains."""

    __tablename__ = "works_on"

    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), primary_key=True)
    muscle_group_id: Mapped[int] = mapped_column(
        ForeignKey("muscle_groups.id"), primary_key=True
    )


class Photo(PKMixin, ReprMixin, UserOwnedMixin, db.Model):
    """Exercise photo stored in the external image store."""

    __tablename__ = "photos"

    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id"), nullable=False, index=True
    )
    public_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (UniqueConstraint("public_id", name="uq_photos_public_id"),)
