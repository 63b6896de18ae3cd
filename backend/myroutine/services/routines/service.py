# myroutine/services/routines/service.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from myroutine.models.routine import ComposedBy, Routine
from myroutine.services._shared.base import BaseService
from myroutine.services._shared.errors import ConflictError, NotFoundError, ServiceError
from myroutine.services.routines.dto import RoutineCreateIn, RoutineListIn, RoutineOut

_FIELD_MAP = {
    "routine_name": "name",
    "description": "description",
    "time_before_start": "time_before_start",
    "usage_count": "usage_count",
    "is_favorite": "is_favorite",
}


class RoutineService(BaseService):
    """
    Routines of the acting user and their exercise membership.

    Deleting a routine removes its ComposedBy rows, then its ScheduledDay
    rows, then the routine, in one unit of work.
    """

    def create(self, dto: RoutineCreateIn) -> RoutineOut:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            row = uow.routines.add(
                Routine(
                    user_id=user_id,
                    name=dto.routine_name.strip(),
                    description=dto.description,
                    time_before_start=dto.time_before_start,
                )
            )
            return RoutineOut.from_model(row)

    def get(self, routine_id: int) -> RoutineOut:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            row = uow.routines.get_for_user(user_id, routine_id)
            if row is None:
                raise NotFoundError("Routine", routine_id)
            return RoutineOut.from_model(row)

    def list(self, dto: RoutineListIn) -> list[RoutineOut]:
        """
        :raises ServiceError: On an unknown sort key or filter.
        """
        user_id = self.require_actor()
        kwargs: dict[str, Any] = {}
        if dto.filter == "day":
            kwargs["day_ids"] = [int(v) for v in dto.filter_values]
        elif dto.filter == "is_favorite":
            kwargs["is_favorite"] = bool(dto.filter_values[0]) if dto.filter_values else True
        elif dto.filter is not None:
            raise ServiceError(f"Unsupported filter: {dto.filter}")

        with self.ro_uow() as uow:
            try:
                rows = uow.routines.list_filtered(
                    user_id, sort_by=dto.sort_by, descending=dto.descending, **kwargs
                )
            except ValueError as exc:
                raise ServiceError(str(exc)) from exc
            return [RoutineOut.from_model(r) for r in rows]

    def list_for_exercise(self, exercise_id: int) -> list[RoutineOut]:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.exercises.get_for_user(user_id, exercise_id) is None:
                raise NotFoundError("Exercise", exercise_id)
            return [RoutineOut.from_model(r) for r in uow.routines.list_for_exercise(user_id, exercise_id)]

    def update(self, routine_id: int, fields: Mapping[str, Any]) -> RoutineOut:
        user_id = self.require_actor()
        if not fields:
            raise ServiceError("At least one field is required")
        updates = {_FIELD_MAP[k]: v for k, v in fields.items() if k in _FIELD_MAP}
        with self.rw_uow() as uow:
            row = uow.routines.get_for_user(user_id, routine_id)
            if row is None:
                raise NotFoundError("Routine", routine_id)
            uow.routines.assign_updates(row, updates)
            return RoutineOut.from_model(row)

    def delete(self, routine_id: int) -> None:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            if uow.routines.get_for_user(user_id, routine_id) is None:
                raise NotFoundError("Routine", routine_id)
            uow.composed_by.delete_by_user_routine(user_id, routine_id)
            uow.scheduled_days.delete_by_user_routine(user_id, routine_id)
            uow.routines.delete_for_user(user_id, routine_id)

    # ------------------------------------------------------------------ #
    # Membership
    # ------------------------------------------------------------------ #

    def add_exercise(
        self, routine_id: int, exercise_id: int, exercise_order: int | None = None
    ) -> None:
        """
        :raises NotFoundError: When the routine or the exercise is not the user's.
        :raises ConflictError: When the exercise is already in the routine.
        """
        user_id = self.require_actor()
        try:
            with self.rw_uow() as uow:
                if uow.routines.get_for_user(user_id, routine_id) is None:
                    raise NotFoundError("Routine", routine_id)
                if uow.exercises.get_for_user(user_id, exercise_id) is None:
                    raise NotFoundError("Exercise", exercise_id)
                if uow.composed_by.exists(
                    user_id=user_id, routine_id=routine_id, exercise_id=exercise_id
                ):
                    raise ConflictError("Routine", "exercise already in routine")
                uow.composed_by.add(
                    ComposedBy(
                        user_id=user_id,
                        routine_id=routine_id,
                        exercise_id=exercise_id,
                        exercise_order=exercise_order,
                    )
                )
        except IntegrityError as ie:
            raise ConflictError("Routine", "exercise already in routine") from ie

    def remove_exercise(self, routine_id: int, exercise_id: int) -> None:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            if not uow.composed_by.delete_link(user_id, routine_id, exercise_id):
                raise NotFoundError("Routine exercise", f"{routine_id}/{exercise_id}")
