"""Unit tests for exercise and routine repositories."""

import pytest

from myroutine.repositories.exercise import ExerciseRepository, SetRepository
from myroutine.repositories.routine import RoutineRepository, ScheduledDayRepository
from tests.factories.exercise import (
    ExerciseFactory,
    MuscleGroupFactory,
    SetFactory,
    WorksOnFactory,
)
from tests.factories.routine import (
    ComposedByFactory,
    DayFactory,
    RoutineFactory,
    ScheduledDayFactory,
)
from tests.factories.user import UserFactory


class TestExerciseRepository:
    @pytest.fixture()
    def repo(self):
        return ExerciseRepository()

    def test_list_by_user_defaults_to_id_order(self, repo):
        user = UserFactory()
        first = ExerciseFactory(user_id=user.id, name="B")
        second = ExerciseFactory(user_id=user.id, name="A")
        ExerciseFactory()  # someone else's

        assert [e.id for e in repo.list_by_user(user.id)] == [first.id, second.id]

    def test_sort_by_whitelisted_key(self, repo):
        user = UserFactory()
        ExerciseFactory(user_id=user.id, name="Squat", intensity=3)
        ExerciseFactory(user_id=user.id, name="Bench", intensity=1)

        rows = repo.list_filtered(user.id, sort_by="exercise_name")
        assert [e.name for e in rows] == ["Bench", "Squat"]

        rows = repo.list_filtered(user.id, sort_by="intensity", descending=True)
        assert [e.intensity for e in rows] == [3, 1]

    def test_unknown_sort_key_rejected(self, repo):
        with pytest.raises(ValueError, match="Unsupported sort key"):
            repo.list_filtered(1, sort_by="password_hash")

    def test_filters_combine(self, repo):
        user = UserFactory()
        chest = MuscleGroupFactory()
        fav_hard = ExerciseFactory(user_id=user.id, intensity=3, is_favorite=True)
        ExerciseFactory(user_id=user.id, intensity=3, is_favorite=False)
        ExerciseFactory(user_id=user.id, intensity=1, is_favorite=True)
        WorksOnFactory(user_id=user.id, exercise_id=fav_hard.id, muscle_group_id=chest.id)

        assert [e.id for e in repo.list_filtered(user.id, intensities=[3], is_favorite=True)] == [
            fav_hard.id
        ]
        assert [e.id for e in repo.list_filtered(user.id, muscle_group_ids=[chest.id])] == [
            fav_hard.id
        ]

    def test_list_for_routine_follows_order(self, repo):
        user = UserFactory()
        routine = RoutineFactory(user_id=user.id)
        a = ExerciseFactory(user_id=user.id)
        b = ExerciseFactory(user_id=user.id)
        ComposedByFactory(user_id=user.id, routine_id=routine.id, exercise_id=a.id, exercise_order=2)
        ComposedByFactory(user_id=user.id, routine_id=routine.id, exercise_id=b.id, exercise_order=1)

        assert [e.id for e in repo.list_for_routine(user.id, routine.id)] == [b.id, a.id]

    def test_assign_updates_is_strict(self, repo):
        exercise = ExerciseFactory()

        repo.assign_updates(exercise, {"name": "Renamed"})
        assert exercise.name == "Renamed"
        with pytest.raises(ValueError):
            repo.assign_updates(exercise, {"user_id": 999})

    def test_delete_where_requires_criteria(self, repo):
        with pytest.raises(ValueError):
            repo.delete_where()


class TestScopedChildren:
    def test_set_lookup_is_scoped_to_owner_and_exercise(self):
        row = SetFactory()
        repo = SetRepository()

        assert repo.get_in_exercise(row.user_id, row.exercise_id, row.id) is not None
        assert repo.get_in_exercise(row.user_id + 1000, row.exercise_id, row.id) is None
        assert repo.get_in_exercise(row.user_id, row.exercise_id + 1000, row.id) is None

    def test_days_of_routine(self):
        user = UserFactory()
        routine = RoutineFactory(user_id=user.id)
        monday = DayFactory(name="Mon-test")
        friday = DayFactory(name="Fri-test")
        ScheduledDayFactory(user_id=user.id, routine_id=routine.id, day_id=friday.id)
        ScheduledDayFactory(user_id=user.id, routine_id=routine.id, day_id=monday.id)

        days = ScheduledDayRepository().days_of(user.id, routine.id)
        assert {d.name for d in days} == {"Mon-test", "Fri-test"}

    def test_routines_of_exercise(self):
        user = UserFactory()
        exercise = ExerciseFactory(user_id=user.id)
        routine = RoutineFactory(user_id=user.id)
        RoutineFactory(user_id=user.id)
        ComposedByFactory(user_id=user.id, routine_id=routine.id, exercise_id=exercise.id)

        rows = RoutineRepository().list_for_exercise(user.id, exercise.id)
        assert [r.id for r in rows] == [routine.id]
