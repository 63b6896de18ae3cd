# myroutine/services/catalog/dto.py
from __future__ import annotations

from dataclasses import dataclass

from myroutine.models.exercise import MuscleGroup
from myroutine.models.routine import Day

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

MUSCLE_GROUPS = (
    "Chest",
    "Back",
    "Shoulders",
    "Biceps",
    "Triceps",
    "Forearms",
    "Abs",
    "Glutes",
    "Quadriceps",
    "Hamstrings",
    "Calves",
)


@dataclass(frozen=True, slots=True)
class DayOut:
    id_day: int
    day_name: str

    @classmethod
    def from_model(cls, row: Day) -> DayOut:
        return cls(id_day=row.id, day_name=row.name)


@dataclass(frozen=True, slots=True)
class MuscleGroupOut:
    id_muscle_group: int
    muscle_group_name: str

    @classmethod
    def from_model(cls, row: MuscleGroup) -> MuscleGroupOut:
        return cls(id_muscle_group=row.id, muscle_group_name=row.name)


@dataclass(frozen=True, slots=True)
class SeedResult:
    days: int
    muscle_groups: int
