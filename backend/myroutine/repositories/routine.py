"""Repositories for routines, their exercise links and their schedule."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from myroutine.models.routine import ComposedBy, Day, Routine, ScheduledDay

from .base import BaseRepository, ExerciseScopedRepository, UserScopedRepository


class RoutineRepository(UserScopedRepository[Routine]):
    model = Routine

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "routine_name": Routine.name,
            "created_at": Routine.created_at,
            "usage_count": Routine.usage_count,
        }

    def _updatable_fields(self) -> set[str]:
        return {"name", "description", "time_before_start", "usage_count", "is_favorite"}

    def list_filtered(
        self,
        user_id: int,
        *,
        day_ids: Sequence[int] | None = None,
        is_favorite: bool | None = None,
        sort_by: str | None = None,
        descending: bool = False,
    ) -> list[Routine]:
        stmt = select(Routine).where(Routine.user_id == user_id)
        if is_favorite is not None:
            stmt = stmt.where(Routine.is_favorite.is_(is_favorite))
        if day_ids:
            scheduled = select(ScheduledDay.routine_id).where(
                ScheduledDay.user_id == user_id, ScheduledDay.day_id.in_(list(day_ids))
            )
            stmt = stmt.where(Routine.id.in_(scheduled))
        stmt = self._apply_sort(stmt, sort_by, descending)
        return list(self.session.execute(stmt).scalars())

    def list_for_exercise(self, user_id: int, exercise_id: int) -> list[Routine]:
        stmt = (
            select(Routine)
            .join(ComposedBy, ComposedBy.routine_id == Routine.id)
            .where(ComposedBy.user_id == user_id, ComposedBy.exercise_id == exercise_id)
            .order_by(Routine.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def delete_for_user(self, user_id: int, routine_id: int) -> int:
        return self.delete_where(Routine.user_id == user_id, Routine.id == routine_id)


class ComposedByRepository(ExerciseScopedRepository[ComposedBy]):
    model = ComposedBy

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return None

    def delete_by_user_routine(self, user_id: int, routine_id: int) -> int:
        return self.delete_where(ComposedBy.user_id == user_id, ComposedBy.routine_id == routine_id)

    def delete_link(self, user_id: int, routine_id: int, exercise_id: int) -> int:
        return self.delete_where(
            ComposedBy.user_id == user_id,
            ComposedBy.routine_id == routine_id,
            ComposedBy.exercise_id == exercise_id,
        )


class ScheduledDayRepository(UserScopedRepository[ScheduledDay]):
    model = ScheduledDay

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return None

    def delete_by_user_routine(self, user_id: int, routine_id: int) -> int:
        return self.delete_where(
            ScheduledDay.user_id == user_id, ScheduledDay.routine_id == routine_id
        )

    def delete_link(self, user_id: int, routine_id: int, day_id: int) -> int:
        return self.delete_where(
            ScheduledDay.user_id == user_id,
            ScheduledDay.routine_id == routine_id,
            ScheduledDay.day_id == day_id,
        )

    def days_of(self, user_id: int, routine_id: int) -> list[Day]:
        stmt = (
            select(Day)
            .join(ScheduledDay, ScheduledDay.day_id == Day.id)
            .where(ScheduledDay.user_id == user_id, ScheduledDay.routine_id == routine_id)
            .order_by(Day.id.asc())
        )
        return list(self.session.execute(stmt).scalars())


class DayRepository(BaseRepository[Day]):
    model = Day
