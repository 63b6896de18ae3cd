# myroutine/services/sets/service.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from myroutine.models.exercise import RepetitionSet, Set, TimeSet
from myroutine.services._shared.base import BaseService
from myroutine.services._shared.errors import NotFoundError, ServiceError
from myroutine.services.sets.dto import REPETITION, TIME, SetCreateIn, SetOut
from myroutine.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _validate_quantity(kind: str, quantity: Any) -> str | int:
    if kind == TIME:
        if not isinstance(quantity, str) or not quantity.strip():
            raise ServiceError("A time set needs a duration such as '30 seconds'")
        return quantity.strip()
    if kind == REPETITION:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ServiceError("A repetition set needs a positive integer quantity")
        return quantity
    raise ServiceError(f"Unsupported set type: {kind}")


class SetService(BaseService):
    """
    Sets of an exercise. Each set owns exactly one TimeSet or RepetitionSet
    row describing its quantity; both are written in the same unit of work.
    """

    def create(self, dto: SetCreateIn) -> SetOut:
        user_id = self.require_actor()
        quantity = _validate_quantity(dto.type, dto.quantity)
        with self.rw_uow() as uow:
            if uow.exercises.get_for_user(user_id, dto.id_exercise) is None:
                raise NotFoundError("Exercise", dto.id_exercise)
            row = uow.sets.add(
                Set(
                    user_id=user_id,
                    exercise_id=dto.id_exercise,
                    weight=dto.weight,
                    rest_after_set=dto.rest_after_set,
                    set_order=dto.set_order,
                )
            )
            self._add_quantity(uow, row, dto.type, quantity)
            return self._reload(uow, row)

    def list_for_exercise(self, exercise_id: int) -> list[SetOut]:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.exercises.get_for_user(user_id, exercise_id) is None:
                raise NotFoundError("Exercise", exercise_id)
            return [SetOut.from_model(r) for r in uow.sets.list_by_exercise(user_id, exercise_id)]

    def update(self, set_id: int, exercise_id: int, fields: Mapping[str, Any]) -> SetOut:
        """
        Partially update a set. Changing ``type`` swaps the quantity row and
        requires a matching ``quantity``.

        :raises ServiceError: When ``fields`` is empty or the quantity is invalid.
        :raises NotFoundError: When the set is not the user's.
        """
        user_id = self.require_actor()
        if not fields:
            raise ServiceError("At least one field is required")
        updates = dict(fields)
        new_kind = updates.pop("type", None)
        new_quantity = updates.pop("quantity", None)

        with self.rw_uow() as uow:
            row = uow.sets.get_in_exercise(user_id, exercise_id, set_id)
            if row is None:
                raise NotFoundError("Set", set_id)
            if updates:
                uow.sets.assign_updates(row, updates)

            kind = new_kind or row.kind
            if new_kind is not None or new_quantity is not None:
                quantity = _validate_quantity(
                    kind, new_quantity if new_quantity is not None else row.quantity
                )
                uow.time_sets.delete_for_set(user_id, row.id)
                uow.repetition_sets.delete_for_set(user_id, row.id)
                self._add_quantity(uow, row, kind, quantity)
            return self._reload(uow, row)

    def delete(self, set_id: int, exercise_id: int) -> None:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            row = uow.sets.get_in_exercise(user_id, exercise_id, set_id)
            if row is None:
                raise NotFoundError("Set", set_id)
            uow.time_sets.delete_for_set(user_id, set_id)
            uow.repetition_sets.delete_for_set(user_id, set_id)
            uow.sets.delete_where(Set.id == set_id, Set.user_id == user_id)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def _add_quantity(uow: SQLAlchemyUnitOfWork, row: Set, kind: str, quantity: str | int) -> None:
        if kind == TIME:
            uow.time_sets.add(
                TimeSet(set_id=row.id, user_id=row.user_id, exercise_id=row.exercise_id, duration=quantity)
            )
        else:
            uow.repetition_sets.add(
                RepetitionSet(
                    set_id=row.id,
                    user_id=row.user_id,
                    exercise_id=row.exercise_id,
                    repetitions=quantity,
                )
            )

    @staticmethod
    def _reload(uow: SQLAlchemyUnitOfWork, row: Set) -> SetOut:
        # The quantity relationships are view-only; refresh them after writes.
        uow.session.refresh(row)
        return SetOut.from_model(row)
