# tests/unit/services/test_exercise_service.py
from __future__ import annotations

import pytest

from myroutine.services._shared.errors import NotFoundError, ServiceError
from myroutine.services.exercises.dto import ExerciseCreateIn, ExerciseListIn
from myroutine.services.exercises.service import ExerciseService
from tests.factories.exercise import ExerciseFactory, MuscleGroupFactory, WorksOnFactory
from tests.factories.routine import ComposedByFactory, RoutineFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def user(session):
    row = UserFactory()
    session.commit()
    return row


@pytest.fixture()
def service(user, ctx_for) -> ExerciseService:
    return ExerciseService(ctx=ctx_for(user.id))


def test_create_and_get(service):
    out = service.create(
        ExerciseCreateIn(exercise_name=" Squat ", time_after_exercise="2 minutes", intensity=3)
    )

    assert out.exercise_name == "Squat"
    assert out.is_favorite is False
    assert service.get(out.id_exercise) == out


def test_get_foreign_exercise(service):
    stranger = ExerciseFactory()

    with pytest.raises(NotFoundError):
        service.get(stranger.id)


def test_list_filters_and_sorts(service, user, session):
    easy = ExerciseFactory(user_id=user.id, name="Plank", intensity=1, is_favorite=True)
    hard = ExerciseFactory(user_id=user.id, name="Burpee", intensity=3)
    legs = MuscleGroupFactory()
    WorksOnFactory(user_id=user.id, exercise_id=hard.id, muscle_group_id=legs.id)
    session.commit()

    by_name = service.list(ExerciseListIn(sort_by="exercise_name"))
    assert [e.exercise_name for e in by_name] == ["Burpee", "Plank"]

    favorites = service.list(ExerciseListIn(filter="is_favorite", filter_values=[True]))
    assert [e.id_exercise for e in favorites] == [easy.id]

    by_group = service.list(ExerciseListIn(filter="muscle_group", filter_values=[legs.id]))
    assert [e.id_exercise for e in by_group] == [hard.id]

    by_intensity = service.list(ExerciseListIn(filter="intensity", filter_values=[1, 2]))
    assert [e.id_exercise for e in by_intensity] == [easy.id]


@pytest.mark.parametrize(
    "dto",
    [ExerciseListIn(sort_by="password"), ExerciseListIn(filter="color", filter_values=["red"])],
)
def test_list_rejects_unknown_options(service, dto):
    with pytest.raises(ServiceError):
        service.list(dto)


def test_list_for_routine(service, user, session):
    routine = RoutineFactory(user_id=user.id)
    exercise = ExerciseFactory(user_id=user.id)
    ExerciseFactory(user_id=user.id)
    ComposedByFactory(user_id=user.id, routine_id=routine.id, exercise_id=exercise.id)
    session.commit()

    assert [e.id_exercise for e in service.list_for_routine(routine.id)] == [exercise.id]
    with pytest.raises(NotFoundError):
        service.list_for_routine(routine.id + 1000)


def test_update(service, user, session):
    exercise = ExerciseFactory(user_id=user.id)
    session.commit()

    out = service.update(exercise.id, {"exercise_name": "Renamed", "is_favorite": True})

    assert (out.exercise_name, out.is_favorite) == ("Renamed", True)
    with pytest.raises(ServiceError):
        service.update(exercise.id, {})
