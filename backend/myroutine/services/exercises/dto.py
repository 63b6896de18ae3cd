# myroutine/services/exercises/dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from myroutine.models.exercise import Exercise


@dataclass(frozen=True, slots=True)
class ExerciseCreateIn:
    exercise_name: str
    time_after_exercise: str
    intensity: int
    description: str = ""


@dataclass(frozen=True, slots=True)
class ExerciseListIn:
    """
    Listing options.

    :param sort_by: ``exercise_name``, ``created_at`` or ``intensity``.
    :param descending: Reverse the sort order.
    :param filter: ``intensity``, ``muscle_group`` or ``is_favorite``.
    :param filter_values: Values for ``filter``; ids or intensities for the
        first two, a single boolean for ``is_favorite``.
    """

    sort_by: str | None = None
    descending: bool = False
    filter: str | None = None
    filter_values: Sequence[int | bool] = ()


@dataclass(frozen=True, slots=True)
class ExerciseOut:
    id_exercise: int
    exercise_name: str
    description: str
    time_after_exercise: str
    intensity: int
    is_favorite: bool
    created_at: datetime | None

    @classmethod
    def from_model(cls, row: Exercise) -> ExerciseOut:
        return cls(
            id_exercise=row.id,
            exercise_name=row.name,
            description=row.description,
            time_after_exercise=row.time_after_exercise,
            intensity=row.intensity,
            is_favorite=row.is_favorite,
            created_at=row.created_at,
        )
