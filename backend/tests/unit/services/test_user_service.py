# tests/unit/services/test_user_service.py
from __future__ import annotations

import pytest

from myroutine.models.feedback import Feedback
from myroutine.models.user import User
from myroutine.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    ServiceError,
)
from myroutine.services._shared.ports.image_store import InMemoryImageStore
from myroutine.services.users.dto import PhotoUpload
from myroutine.services.users.service import UserService
from tests.factories.user import UserFactory


@pytest.fixture()
def user(session):
    row = UserFactory(email="ana@example.com", profile_photo_public_id="default_bx6tka")
    session.commit()
    return row


def _service(ctx_for, user_id, images=None) -> UserService:
    return UserService(
        image_store=images or InMemoryImageStore(),
        default_profile_photo_id="default_bx6tka",
        ctx=ctx_for(user_id),
    )


def test_get_profile_requires_actor():
    with pytest.raises(AuthenticationError):
        UserService().get_profile()


def test_get_profile_hides_credentials(user, ctx_for):
    out = _service(ctx_for, user.id).get_profile()

    assert out.email == "ana@example.com"
    assert not hasattr(out, "password_hash")
    assert not hasattr(out, "id")


def test_update_profile_fields(user, ctx_for, session):
    out = _service(ctx_for, user.id).update_profile({"theme": "dark", "rating": 5})

    assert (out.theme, out.rating) == ("dark", 5)
    session.expire_all()
    assert session.get(User, user.id).theme == "dark"


def test_update_profile_requires_a_change(user, ctx_for):
    with pytest.raises(ServiceError, match="At least one field"):
        _service(ctx_for, user.id).update_profile({})


def test_update_email_conflict(user, ctx_for, session):
    UserFactory(email="taken@example.com")
    session.commit()

    with pytest.raises(ConflictError):
        _service(ctx_for, user.id).update_profile({"email": "Taken@example.com"})


def test_replacing_default_photo_keeps_default_image(user, ctx_for):
    images = InMemoryImageStore()

    out = _service(ctx_for, user.id, images).update_profile({}, photo=PhotoUpload(b"jpeg", "me.jpg"))

    assert out.profile_photo.startswith("https://images.invalid/img_")
    assert images.deleted == []


def test_replacing_custom_photo_deletes_previous(user, ctx_for):
    images = InMemoryImageStore()
    service = _service(ctx_for, user.id, images)
    service.update_profile({}, photo=PhotoUpload(b"first"))
    [first_id] = list(images.images)

    service.update_profile({}, photo=PhotoUpload(b"second"))

    assert images.deleted == [first_id]
    assert first_id not in images.images


def test_failed_write_discards_new_upload(user, ctx_for, session):
    UserFactory(email="taken@example.com")
    session.commit()
    images = InMemoryImageStore()

    with pytest.raises(ConflictError):
        _service(ctx_for, user.id, images).update_profile(
            {"email": "taken@example.com"}, photo=PhotoUpload(b"jpeg")
        )
    assert images.images == {}


def test_upload_failure_changes_nothing(user, ctx_for, session):
    images = InMemoryImageStore(fail_uploads=True)

    with pytest.raises(ExternalServiceError):
        _service(ctx_for, user.id, images).update_profile({"theme": "dark"}, photo=PhotoUpload(b"x"))
    session.expire_all()
    assert session.get(User, user.id).theme is None


def test_add_feedback(user, ctx_for, session):
    out = _service(ctx_for, user.id).add_feedback("  Great app  ")

    assert out.comment == "Great app"
    assert session.query(Feedback).filter_by(user_id=user.id).count() == 1
