"""HTTP tests for the authenticated profile, feedback and account deletion."""

from __future__ import annotations

import io

from myroutine.models.user import User
from tests.helpers.assertions import assert_failure, assert_success
from tests.helpers.auth import ACCESS_COOKIE, cookie


def test_get_profile(client, user) -> None:
    resource = assert_success(client.get("/api/v1/user"))

    assert resource["email"] == user.email
    assert resource["profile_photo"] == user.profile_photo_url


def test_update_profile_json(client, user) -> None:
    resource = assert_success(client.put("/api/v1/user", json={"theme": "dark", "rating": 4}))

    assert (resource["theme"], resource["rating"]) == ("dark", 4)


def test_update_profile_rejects_bad_values(client, user) -> None:
    resource = assert_failure(client.put("/api/v1/user", json={"rating": 9}), 400)

    assert "rating" in resource["errors"]


def test_update_profile_requires_a_change(client, user) -> None:
    assert_failure(client.put("/api/v1/user", json={}), 400, "At least one field is required")


def test_update_profile_photo_multipart(client, user, image_store) -> None:
    response = client.put(
        "/api/v1/user",
        data={"photo": (io.BytesIO(b"jpeg-bytes"), "me.jpg"), "goal": "Run 10k"},
        content_type="multipart/form-data",
    )

    resource = assert_success(response)
    assert resource["goal"] == "Run 10k"
    assert resource["profile_photo"].startswith("https://images.invalid/")
    assert list(image_store.images.values()) == [b"jpeg-bytes"]


def test_feedback(client, user) -> None:
    resource = assert_success(client.post("/api/v1/user/feedback", json={"comment": "Nice"}), 201)

    assert resource["comment"] == "Nice"
    assert_failure(client.post("/api/v1/user/feedback", json={"comment": ""}), 400)


def test_delete_account(client, user, session) -> None:
    user_id = user.id
    client.post(
        "/api/v1/exercise",
        json={"exercise_name": "Squat", "time_after_exercise": "1 minute", "intensity": 2},
    )

    resource = assert_success(client.delete("/api/v1/user"))

    assert resource["deleted"]["user"] == 1
    assert resource["deleted"]["exercises"] == 1
    assert cookie(client, ACCESS_COOKIE) is None
    assert session.get(User, user_id) is None
