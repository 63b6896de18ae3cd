"""Repositories for the exercise aggregate."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from myroutine.models.exercise import (
    Exercise,
    MuscleGroup,
    Photo,
    RepetitionSet,
    Set,
    TimeSet,
    WorksOn,
)
from myroutine.models.routine import ComposedBy

from .base import BaseRepository, ExerciseScopedRepository, UserScopedRepository


class ExerciseRepository(UserScopedRepository[Exercise]):
    model = Exercise

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "exercise_name": Exercise.name,
            "created_at": Exercise.created_at,
            "intensity": Exercise.intensity,
        }

    def _updatable_fields(self) -> set[str]:
        return {"name", "description", "time_after_exercise", "intensity", "is_favorite"}

    def list_filtered(
        self,
        user_id: int,
        *,
        intensities: Sequence[int] | None = None,
        muscle_group_ids: Sequence[int] | None = None,
        is_favorite: bool | None = None,
        sort_by: str | None = None,
        descending: bool = False,
    ) -> list[Exercise]:
        """List a user's exercises with optional filters combined by AND.

        :raises ValueError: If ``sort_by`` is not whitelisted.
        """
        stmt = select(Exercise).where(Exercise.user_id == user_id)
        if intensities:
            stmt = stmt.where(Exercise.intensity.in_(list(intensities)))
        if is_favorite is not None:
            stmt = stmt.where(Exercise.is_favorite.is_(is_favorite))
        if muscle_group_ids:
            linked = select(WorksOn.exercise_id).where(
                WorksOn.user_id == user_id,
                WorksOn.muscle_group_id.in_(list(muscle_group_ids)),
            )
            stmt = stmt.where(Exercise.id.in_(linked))
        stmt = self._apply_sort(stmt, sort_by, descending)
        return list(self.session.execute(stmt).scalars())

    def list_for_routine(self, user_id: int, routine_id: int) -> list[Exercise]:
        """Exercises of a routine in their configured order."""
        stmt = (
            select(Exercise)
            .join(ComposedBy, ComposedBy.exercise_id == Exercise.id)
            .where(ComposedBy.user_id == user_id, ComposedBy.routine_id == routine_id)
            .order_by(ComposedBy.exercise_order.asc(), Exercise.id.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def delete_for_user(self, user_id: int, exercise_id: int) -> int:
        return self.delete_where(Exercise.user_id == user_id, Exercise.id == exercise_id)


class SetRepository(ExerciseScopedRepository[Set]):
    model = Set

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"set_order": Set.set_order}

    def _updatable_fields(self) -> set[str]:
        return {"weight", "rest_after_set", "set_order"}

    def list_by_exercise(self, user_id: int, exercise_id: int) -> list[Set]:
        stmt = select(Set).where(Set.user_id == user_id, Set.exercise_id == exercise_id)
        stmt = self._apply_sort(stmt, "set_order")
        return list(self.session.execute(stmt).scalars())

    def get_in_exercise(self, user_id: int, exercise_id: int, set_id: int) -> Set | None:
        stmt = select(Set).where(
            Set.id == set_id, Set.user_id == user_id, Set.exercise_id == exercise_id
        )
        return self.session.execute(stmt).scalars().first()


class _SetQuantityRepository(ExerciseScopedRepository[Any]):
    """Shared behaviour of the two set-quantity subtype tables."""

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return self.model.set_id

    def delete_for_set(self, user_id: int, set_id: int) -> int:
        return self.delete_where(self.model.user_id == user_id, self.model.set_id == set_id)


class TimeSetRepository(_SetQuantityRepository):
    model = TimeSet


class RepetitionSetRepository(_SetQuantityRepository):
    model = RepetitionSet


class WorksOnRepository(ExerciseScopedRepository[WorksOn]):
    model = WorksOn

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return None

    def delete_link(self, user_id: int, exercise_id: int, muscle_group_id: int) -> int:
        return self.delete_where(
            WorksOn.user_id == user_id,
            WorksOn.exercise_id == exercise_id,
            WorksOn.muscle_group_id == muscle_group_id,
        )

    def muscle_groups_of(self, user_id: int, exercise_id: int) -> list[MuscleGroup]:
        stmt = (
            select(MuscleGroup)
            .join(WorksOn, WorksOn.muscle_group_id == MuscleGroup.id)
            .where(WorksOn.user_id == user_id, WorksOn.exercise_id == exercise_id)
            .order_by(MuscleGroup.id.asc())
        )
        return list(self.session.execute(stmt).scalars())


class PhotoRepository(ExerciseScopedRepository[Photo]):
    model = Photo

    def find_in_exercise(self, user_id: int, exercise_id: int, public_id: str) -> Photo | None:
        return self.find_one(user_id=user_id, exercise_id=exercise_id, public_id=public_id)


class MuscleGroupRepository(BaseRepository[MuscleGroup]):
    model = MuscleGroup
