# tests/unit/services/test_catalog_service.py
from __future__ import annotations

import pytest

from myroutine.services._shared.errors import ConflictError, NotFoundError
from myroutine.services.catalog.dto import MUSCLE_GROUPS, WEEKDAYS
from myroutine.services.catalog.service import CatalogService
from tests.factories.exercise import ExerciseFactory
from tests.factories.routine import RoutineFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def seeded(session):
    CatalogService().seed()
    return CatalogService()


def test_seed_is_idempotent():
    first = CatalogService().seed()
    second = CatalogService().seed()

    assert (first.days, first.muscle_groups) == (len(WEEKDAYS), len(MUSCLE_GROUPS))
    assert (second.days, second.muscle_groups) == (0, 0)


def test_seed_fills_only_missing_rows():
    CatalogService().seed(days=["Monday"], muscle_groups=[])

    result = CatalogService().seed()

    assert result.days == len(WEEKDAYS) - 1


def test_lists_catalogs_in_seed_order(seeded):
    assert [d.day_name for d in seeded.list_days()] == list(WEEKDAYS)
    assert [m.muscle_group_name for m in seeded.list_muscle_groups()] == list(MUSCLE_GROUPS)


def test_schedule_routine(seeded, ctx_for, session):
    routine = RoutineFactory(user_id=UserFactory().id)
    session.commit()
    monday, tuesday = seeded.list_days()[:2]
    service = CatalogService(ctx=ctx_for(routine.user_id))

    service.schedule(routine.id, tuesday.id_day)
    service.schedule(routine.id, monday.id_day)

    assert [d.day_name for d in service.days_of_routine(routine.id)] == ["Monday", "Tuesday"]
    with pytest.raises(ConflictError):
        service.schedule(routine.id, monday.id_day)

    service.unschedule(routine.id, monday.id_day)
    assert [d.day_name for d in service.days_of_routine(routine.id)] == ["Tuesday"]
    with pytest.raises(NotFoundError):
        service.unschedule(routine.id, monday.id_day)


def test_schedule_unknown_day_or_foreign_routine(seeded, ctx_for, session):
    routine = RoutineFactory(user_id=UserFactory().id)
    session.commit()
    day = seeded.list_days()[0]

    with pytest.raises(NotFoundError):
        CatalogService(ctx=ctx_for(routine.user_id)).schedule(routine.id, 999)
    with pytest.raises(NotFoundError):
        CatalogService(ctx=ctx_for(routine.user_id + 1000)).schedule(routine.id, day.id_day)


def test_link_muscle_groups(seeded, ctx_for, session):
    exercise = ExerciseFactory(user_id=UserFactory().id)
    session.commit()
    chest = seeded.list_muscle_groups()[0]
    service = CatalogService(ctx=ctx_for(exercise.user_id))

    service.link_muscle_group(exercise.id, chest.id_muscle_group)

    assert [m.muscle_group_name for m in service.muscle_groups_of_exercise(exercise.id)] == [
        chest.muscle_group_name
    ]
    with pytest.raises(ConflictError):
        service.link_muscle_group(exercise.id, chest.id_muscle_group)
    with pytest.raises(NotFoundError):
        service.link_muscle_group(exercise.id, 999)

    service.unlink_muscle_group(exercise.id, chest.id_muscle_group)
    assert service.muscle_groups_of_exercise(exercise.id) == []
    with pytest.raises(NotFoundError):
        service.unlink_muscle_group(exercise.id, chest.id_muscle_group)
