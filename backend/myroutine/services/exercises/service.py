# myroutine/services/exercises/service.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from myroutine.models.exercise import Exercise
from myroutine.services._shared.base import BaseService
from myroutine.services._shared.errors import NotFoundError, ServiceError
from myroutine.services.exercises.dto import ExerciseCreateIn, ExerciseListIn, ExerciseOut

# Public API field → model attribute
_FIELD_MAP = {
    "exercise_name": "name",
    "description": "description",
    "time_after_exercise": "time_after_exercise",
    "intensity": "intensity",
    "is_favorite": "is_favorite",
}


class ExerciseService(BaseService):
    """
    CRUD over the acting user's exercises.

    Deletion is a cascade and lives in
    :class:`~myroutine.services.cascade.service.AggregateDeletionService`.
    """

    def create(self, dto: ExerciseCreateIn) -> ExerciseOut:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            row = uow.exercises.add(
                Exercise(
                    user_id=user_id,
                    name=dto.exercise_name.strip(),
                    description=dto.description,
                    time_after_exercise=dto.time_after_exercise,
                    intensity=dto.intensity,
                )
            )
            return ExerciseOut.from_model(row)

    def get(self, exercise_id: int) -> ExerciseOut:
        """
        :raises NotFoundError: When the exercise is not the user's.
        """
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            row = uow.exercises.get_for_user(user_id, exercise_id)
            if row is None:
                raise NotFoundError("Exercise", exercise_id)
            return ExerciseOut.from_model(row)

    def list(self, dto: ExerciseListIn) -> list[ExerciseOut]:
        """
        List exercises with one optional filter and a whitelisted sort.

        :raises ServiceError: On an unknown sort key or filter.
        """
        user_id = self.require_actor()
        kwargs: dict[str, Any] = {}
        if dto.filter == "intensity":
            kwargs["intensities"] = [int(v) for v in dto.filter_values]
        elif dto.filter == "muscle_group":
            kwargs["muscle_group_ids"] = [int(v) for v in dto.filter_values]
        elif dto.filter == "is_favorite":
            kwargs["is_favorite"] = bool(dto.filter_values[0]) if dto.filter_values else True
        elif dto.filter is not None:
            raise ServiceError(f"Unsupported filter: {dto.filter}")

        with self.ro_uow() as uow:
            try:
                rows = uow.exercises.list_filtered(
                    user_id, sort_by=dto.sort_by, descending=dto.descending, **kwargs
                )
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            return [ExerciseOut.from_model(r) for r in rows]

    def list_for_routine(self, routine_id: int) -> list[ExerciseOut]:
        """
        :raises NotFoundError: When the routine is not the user's.
        """
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.routines.get_for_user(user_id, routine_id) is None:
                raise NotFoundError("Routine", routine_id)
            return [ExerciseOut.from_model(r) for r in uow.exercises.list_for_routine(user_id, routine_id)]

    def update(self, exercise_id: int, fields: Mapping[str, Any]) -> ExerciseOut:
        """
        Partially update an exercise.

        :raises ServiceError: When ``fields`` is empty.
        :raises NotFoundError: When the exercise is not the user's.
        """
        user_id = self.require_actor()
        if not fields:
            raise ServiceError("At least one field is required")
        updates = {_FIELD_MAP[k]: v for k, v in fields.items() if k in _FIELD_MAP}
        with self.rw_uow() as uow:
            row = uow.exercises.get_for_user(user_id, exercise_id)
            if row is None:
                raise NotFoundError("Exercise", exercise_id)
            uow.exercises.assign_updates(row, updates)
            return ExerciseOut.from_model(row)
