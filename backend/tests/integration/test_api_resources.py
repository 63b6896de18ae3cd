"""HTTP tests for exercises, routines, sets and photos."""

from __future__ import annotations

import io

import pytest

from tests.factories.exercise import ExerciseFactory
from tests.helpers.assertions import assert_failure, assert_success

EXERCISE = {"exercise_name": "Bench press", "time_after_exercise": "2 minutes", "intensity": 3}


@pytest.fixture()
def exercise_id(client, user) -> int:
    return assert_success(client.post("/api/v1/exercise", json=EXERCISE), 201)["id_exercise"]


def test_exercise_crud(client, exercise_id) -> None:
    fetched = assert_success(client.get(f"/api/v1/exercise/{exercise_id}"))
    assert fetched["exercise_name"] == "Bench press"

    updated = assert_success(client.put(f"/api/v1/exercise/{exercise_id}", json={"is_favorite": True}))
    assert updated["is_favorite"] is True

    assert_success(client.delete(f"/api/v1/exercise/{exercise_id}"))
    assert_failure(client.get(f"/api/v1/exercise/{exercise_id}"), 404)


def test_exercise_list_query(client, user) -> None:
    for name, intensity in (("Row", 1), ("Curl", 2), ("Deadlift", 3)):
        client.post("/api/v1/exercise", json={**EXERCISE, "exercise_name": name, "intensity": intensity})

    resource = assert_success(
        client.get("/api/v1/exercise?sort_by=exercise_name&order=DESC&filter=intensity&filter_values=1,3")
    )

    assert [e["exercise_name"] for e in resource] == ["Row", "Deadlift"]
    assert_failure(client.get("/api/v1/exercise?sort_by=password"), 400)


def test_exercise_of_another_user_is_hidden(client, user, session) -> None:
    foreign = ExerciseFactory()
    session.commit()

    assert_failure(client.get(f"/api/v1/exercise/{foreign.id}"), 404)
    assert_failure(client.delete(f"/api/v1/exercise/{foreign.id}"), 404)


def test_sets(client, exercise_id) -> None:
    created = assert_success(
        client.post(
            "/api/v1/set",
            json={"id_exercise": exercise_id, "type": "repetition", "quantity": 12, "weight": 40},
        ),
        201,
    )
    assert (created["type"], created["quantity"]) == ("repetition", 12)

    url = f"/api/v1/set/{created['id_set']}/exercise/{exercise_id}"
    updated = assert_success(client.put(url, json={"type": "time", "quantity": "45 seconds"}))
    assert (updated["type"], updated["quantity"]) == ("time", "45 seconds")

    listed = assert_success(client.get(f"/api/v1/set/exercise/{exercise_id}"))
    assert [s["id_set"] for s in listed] == [created["id_set"]]

    assert_success(client.delete(url))
    assert assert_success(client.get(f"/api/v1/set/exercise/{exercise_id}")) == []


def test_set_quantity_must_match_type(client, exercise_id) -> None:
    response = client.post(
        "/api/v1/set", json={"id_exercise": exercise_id, "type": "repetition", "quantity": "ten"}
    )

    assert_failure(response, 400)


def test_photos(client, exercise_id, image_store) -> None:
    uploaded = assert_success(
        client.post(
            f"/api/v1/photo/exercise/{exercise_id}",
            data={"photo": (io.BytesIO(b"img"), "bar.jpg")},
            content_type="multipart/form-data",
        ),
        201,
    )
    public_id = uploaded["public_id"]
    assert public_id in image_store.images

    listed = assert_success(client.get(f"/api/v1/photo/exercise/{exercise_id}"))
    assert [p["public_id"] for p in listed] == [public_id]

    assert_success(client.delete(f"/api/v1/photo/{public_id}/exercise/{exercise_id}"))
    assert image_store.deleted == [public_id]


def test_photo_upload_requires_file(client, exercise_id) -> None:
    response = client.post(
        f"/api/v1/photo/exercise/{exercise_id}", data={}, content_type="multipart/form-data"
    )

    assert_failure(response, 400, "A 'photo' file is required")


def test_routine_membership_and_delete(client, exercise_id) -> None:
    routine = assert_success(client.post("/api/v1/routine", json={"routine_name": "Push"}), 201)
    routine_id = routine["id_routine"]
    link = f"/api/v1/routine/{routine_id}/exercise/{exercise_id}"

    assert_success(client.post(link, json={"exercise_order": 1}), 201)
    assert_failure(client.post(link, json={}), 409)

    members = assert_success(client.get(f"/api/v1/exercise/routine/{routine_id}"))
    assert [e["id_exercise"] for e in members] == [exercise_id]
    owners = assert_success(client.get(f"/api/v1/routine/exercise/{exercise_id}"))
    assert [r["id_routine"] for r in owners] == [routine_id]

    assert_success(client.delete(f"/api/v1/routine/{routine_id}"))
    assert_failure(client.get(f"/api/v1/routine/{routine_id}"), 404)
    assert assert_success(client.get(f"/api/v1/routine/exercise/{exercise_id}")) == []
