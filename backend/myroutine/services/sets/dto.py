# myroutine/services/sets/dto.py
from __future__ import annotations

from dataclasses import dataclass

from myroutine.models.exercise import Set

TIME = "time"
REPETITION = "repetition"


@dataclass(frozen=True, slots=True)
class SetCreateIn:
    """
    :param type: ``"time"`` or ``"repetition"``.
    :param quantity: Duration string for ``time`` (e.g. ``"30 seconds"``),
        positive repetition count for ``repetition``.
    """

    id_exercise: int
    type: str
    quantity: str | int
    weight: float | None = None
    rest_after_set: str | None = None
    set_order: int = 1


@dataclass(frozen=True, slots=True)
class SetOut:
    id_set: int
    id_exercise: int
    weight: float | None
    rest_after_set: str | None
    set_order: int
    type: str | None
    quantity: str | int | None

    @classmethod
    def from_model(cls, row: Set) -> SetOut:
        return cls(
            id_set=row.id,
            id_exercise=row.exercise_id,
            weight=row.weight,
            rest_after_set=row.rest_after_set,
            set_order=row.set_order,
            type=row.kind,
            quantity=row.quantity,
        )
