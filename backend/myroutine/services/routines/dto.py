# myroutine/services/routines/dto.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from myroutine.models.routine import Routine


@dataclass(frozen=True, slots=True)
class RoutineCreateIn:
    routine_name: str
    description: str = ""
    time_before_start: str | None = None


@dataclass(frozen=True, slots=True)
class RoutineListIn:
    """
    :param sort_by: ``routine_name``, ``created_at`` or ``usage_count``.
    :param filter: ``day`` or ``is_favorite``.
    """

    sort_by: str | None = None
    descending: bool = False
    filter: str | None = None
    filter_values: Sequence[int | bool] = ()


@dataclass(frozen=True, slots=True)
class RoutineOut:
    id_routine: int
    routine_name: str
    description: str
    time_before_start: str | None
    usage_count: int
    is_favorite: bool
    created_at: datetime | None

    @classmethod
    def from_model(cls, row: Routine) -> RoutineOut:
        return cls(
            id_routine=row.id,
            routine_name=row.name,
            description=row.description,
            time_before_start=row.time_before_start,
            usage_count=row.usage_count,
            is_favorite=row.is_favorite,
            created_at=row.created_at,
        )
