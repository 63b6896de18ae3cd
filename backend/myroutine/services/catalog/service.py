# myroutine/services/catalog/service.py
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError

from myroutine.models.exercise import MuscleGroup, WorksOn
from myroutine.models.routine import Day, ScheduledDay
from myroutine.services._shared.base import BaseService
from myroutine.services._shared.errors import ConflictError, NotFoundError
from myroutine.services.catalog.dto import (
    MUSCLE_GROUPS,
    WEEKDAYS,
    DayOut,
    MuscleGroupOut,
    SeedResult,
)

log = logging.getLogger(__name__)


class CatalogService(BaseService):
    """
    Fixed Day/MuscleGroup catalogs and the user's links to them.

    Scheduling attaches a routine to a weekday; linking attaches a muscle
    group to an exercise. Both reject duplicates with a conflict.
    """

    # ------------------------------------------------------------------ #
    # Days
    # ------------------------------------------------------------------ #

    def list_days(self) -> list[DayOut]:
        with self.ro_uow() as uow:
            return [DayOut.from_model(d) for d in uow.days.find_all()]

    def schedule(self, routine_id: int, day_id: int) -> None:
        """
        :raises NotFoundError: When the routine is not the user's or the day is unknown.
        :raises ConflictError: When the routine is already scheduled that day.
        """
        user_id = self.require_actor()
        try:
            with self.rw_uow() as uow:
                if uow.routines.get_for_user(user_id, routine_id) is None:
                    raise NotFoundError("Routine", routine_id)
                if uow.days.get(day_id) is None:
                    raise NotFoundError("Day", day_id)
                if uow.scheduled_days.exists(user_id=user_id, routine_id=routine_id, day_id=day_id):
                    raise ConflictError("Day", "routine already scheduled on that day")
                uow.scheduled_days.add(
                    ScheduledDay(user_id=user_id, routine_id=routine_id, day_id=day_id)
                )
        except IntegrityError as ie:
            raise ConflictError("Day", "routine already scheduled on that day") from ie

    def days_of_routine(self, routine_id: int) -> list[DayOut]:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.routines.get_for_user(user_id, routine_id) is None:
                raise NotFoundError("Routine", routine_id)
            return [DayOut.from_model(d) for d in uow.scheduled_days.days_of(user_id, routine_id)]

    def unschedule(self, routine_id: int, day_id: int) -> None:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            if not uow.scheduled_days.delete_link(user_id, routine_id, day_id):
                raise NotFoundError("Scheduled day", f"{routine_id}/{day_id}")

    # ------------------------------------------------------------------ #
    # Muscle groups
    # ------------------------------------------------------------------ #

    def list_muscle_groups(self) -> list[MuscleGroupOut]:
        with self.ro_uow() as uow:
            return [MuscleGroupOut.from_model(m) for m in uow.muscle_groups.find_all()]

    def link_muscle_group(self, exercise_id: int, muscle_group_id: int) -> None:
        """
        :raises NotFoundError: When the exercise is not the user's or the group is unknown.
        :raises ConflictError: When the link already exists.
        """
        user_id = self.require_actor()
        try:
            with self.rw_uow() as uow:
                if uow.exercises.get_for_user(user_id, exercise_id) is None:
                    raise NotFoundError("Exercise", exercise_id)
                if uow.muscle_groups.get(muscle_group_id) is None:
                    raise NotFoundError("Muscle group", muscle_group_id)
                if uow.works_on.exists(
                    user_id=user_id, exercise_id=exercise_id, muscle_group_id=muscle_group_id
                ):
                    raise ConflictError("Muscle group", "already linked to exercise")
                uow.works_on.add(
                    WorksOn(user_id=user_id, exercise_id=exercise_id, muscle_group_id=muscle_group_id)
                )
        except IntegrityError as ie:
            raise ConflictError("Muscle group", "already linked to exercise") from ie

    def muscle_groups_of_exercise(self, exercise_id: int) -> list[MuscleGroupOut]:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.exercises.get_for_user(user_id, exercise_id) is None:
                raise NotFoundError("Exercise", exercise_id)
            return [
                MuscleGroupOut.from_model(m)
                for m in uow.works_on.muscle_groups_of(user_id, exercise_id)
            ]

    def unlink_muscle_group(self, exercise_id: int, muscle_group_id: int) -> None:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            if not uow.works_on.delete_link(user_id, exercise_id, muscle_group_id):
                raise NotFoundError("Muscle group link", f"{muscle_group_id}/{exercise_id}")

    # ------------------------------------------------------------------ #
    # Seeding
    # ------------------------------------------------------------------ #

    def seed(
        self,
        days: Iterable[str] = WEEKDAYS,
        muscle_groups: Iterable[str] = MUSCLE_GROUPS,
    ) -> SeedResult:
        """
        Insert missing catalog rows. Running it twice inserts nothing new.

        :returns: Number of rows inserted per catalog.
        """
        with self.rw_uow() as uow:
            known_days = {d.name for d in uow.days.find_all()}
            new_days = [name for name in days if name not in known_days]
            for name in new_days:
                uow.days.add(Day(name=name))

            known_groups = {m.name for m in uow.muscle_groups.find_all()}
            new_groups = [name for name in muscle_groups if name not in known_groups]
            for name in new_groups:
                uow.muscle_groups.add(MuscleGroup(name=name))

        log.info("Catalog seeded", extra={"count": len(new_days) + len(new_groups)})
        return SeedResult(days=len(new_days), muscle_groups=len(new_groups))
