# tests/unit/services/test_set_service.py
from __future__ import annotations

import pytest

from myroutine.models.exercise import RepetitionSet, Set, TimeSet
from myroutine.services._shared.errors import NotFoundError, ServiceError
from myroutine.services.sets.dto import SetCreateIn
from myroutine.services.sets.service import SetService
from tests.factories.exercise import ExerciseFactory, SetFactory, repetition_set
from tests.factories.user import UserFactory


@pytest.fixture()
def owner(session):
    user = UserFactory()
    exercise = ExerciseFactory(user_id=user.id)
    session.commit()
    return user, exercise


@pytest.fixture()
def service(owner, ctx_for) -> SetService:
    return SetService(ctx=ctx_for(owner[0].id))


def test_create_time_set(service, owner, session):
    _, exercise = owner

    out = service.create(
        SetCreateIn(id_exercise=exercise.id, type="time", quantity=" 30 seconds ", weight=10.5)
    )

    assert out.type == "time"
    assert out.quantity == "30 seconds"
    assert out.weight == 10.5
    assert session.query(TimeSet).filter_by(set_id=out.id_set).count() == 1
    assert session.query(RepetitionSet).filter_by(set_id=out.id_set).count() == 0


def test_create_repetition_set(service, owner):
    _, exercise = owner

    out = service.create(SetCreateIn(id_exercise=exercise.id, type="repetition", quantity=8))

    assert (out.type, out.quantity, out.set_order) == ("repetition", 8, 1)


@pytest.mark.parametrize(
    ("kind", "quantity"),
    [
        ("time", ""),
        ("time", 30),
        ("repetition", 0),
        ("repetition", "8"),
        ("repetition", True),
        ("distance", 5),
    ],
)
def test_create_rejects_bad_quantity(service, owner, session, kind, quantity):
    _, exercise = owner

    with pytest.raises(ServiceError):
        service.create(SetCreateIn(id_exercise=exercise.id, type=kind, quantity=quantity))
    assert session.query(Set).count() == 0


def test_create_on_foreign_exercise(service):
    stranger = ExerciseFactory()

    with pytest.raises(NotFoundError):
        service.create(SetCreateIn(id_exercise=stranger.id, type="repetition", quantity=5))


def test_update_fields_and_swap_kind(service, owner, session):
    _, exercise = owner
    created = service.create(SetCreateIn(id_exercise=exercise.id, type="repetition", quantity=8))

    out = service.update(created.id_set, exercise.id, {"weight": 40.0})
    assert (out.weight, out.type, out.quantity) == (40.0, "repetition", 8)

    out = service.update(created.id_set, exercise.id, {"type": "time", "quantity": "1 minute"})
    assert (out.type, out.quantity) == ("time", "1 minute")
    assert session.query(RepetitionSet).filter_by(set_id=created.id_set).count() == 0


def test_update_quantity_only_keeps_kind(service, owner):
    user, exercise = owner
    row = SetFactory(user_id=user.id, exercise_id=exercise.id)
    repetition_set(row, 10)

    out = service.update(row.id, exercise.id, {"quantity": 15})

    assert (out.type, out.quantity) == ("repetition", 15)


def test_update_validation(service, owner):
    _, exercise = owner
    created = service.create(SetCreateIn(id_exercise=exercise.id, type="time", quantity="20 s"))

    with pytest.raises(ServiceError, match="At least one field"):
        service.update(created.id_set, exercise.id, {})
    with pytest.raises(ServiceError):
        service.update(created.id_set, exercise.id, {"type": "repetition"})
    with pytest.raises(NotFoundError):
        service.update(created.id_set + 1000, exercise.id, {"weight": 1.0})


def test_list_and_delete(service, owner, session):
    _, exercise = owner
    first = service.create(SetCreateIn(id_exercise=exercise.id, type="time", quantity="20 s"))
    second = service.create(
        SetCreateIn(id_exercise=exercise.id, type="repetition", quantity=5, set_order=2)
    )

    assert [s.id_set for s in service.list_for_exercise(exercise.id)] == [
        first.id_set,
        second.id_set,
    ]

    service.delete(first.id_set, exercise.id)

    assert [s.id_set for s in service.list_for_exercise(exercise.id)] == [second.id_set]
    assert session.query(TimeSet).filter_by(set_id=first.id_set).count() == 0
    with pytest.raises(NotFoundError):
        service.delete(first.id_set, exercise.id)
