# tests/unit/services/test_photo_service.py
from __future__ import annotations

import pytest

from myroutine.models.exercise import Photo
from myroutine.repositories.exercise import PhotoRepository
from myroutine.services._shared.errors import ExternalServiceError, NotFoundError
from myroutine.services._shared.ports.image_store import InMemoryImageStore
from myroutine.services.photos.service import PhotoService
from myroutine.services.users.dto import PhotoUpload
from tests.factories.exercise import ExerciseFactory, PhotoFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def exercise(session):
    row = ExerciseFactory(user_id=UserFactory().id)
    session.commit()
    return row


def _service(images, exercise, ctx_for) -> PhotoService:
    return PhotoService(image_store=images, ctx=ctx_for(exercise.user_id))


def test_upload_stores_image_and_row(exercise, ctx_for, session):
    images = InMemoryImageStore()

    out = _service(images, exercise, ctx_for).upload(exercise.id, PhotoUpload(b"jpeg", "a.jpg"))

    assert out.public_id in images.images
    assert out.id_exercise == exercise.id
    assert session.query(Photo).filter_by(public_id=out.public_id).count() == 1


def test_upload_to_foreign_exercise_never_uploads(exercise, ctx_for):
    images = InMemoryImageStore()
    service = PhotoService(image_store=images, ctx=ctx_for(exercise.user_id + 1000))

    with pytest.raises(NotFoundError):
        service.upload(exercise.id, PhotoUpload(b"jpeg"))
    assert images.images == {}


def test_upload_failure_surfaces(exercise, ctx_for, session):
    images = InMemoryImageStore(fail_uploads=True)

    with pytest.raises(ExternalServiceError):
        _service(images, exercise, ctx_for).upload(exercise.id, PhotoUpload(b"jpeg"))
    assert session.query(Photo).count() == 0


def test_failed_row_write_discards_upload(exercise, ctx_for, monkeypatch):
    images = InMemoryImageStore()

    def _boom(self, instance):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(PhotoRepository, "add", _boom)

    with pytest.raises(RuntimeError):
        _service(images, exercise, ctx_for).upload(exercise.id, PhotoUpload(b"jpeg"))
    assert images.images == {}
    assert len(images.deleted) == 1


def test_list_and_delete(exercise, ctx_for, session):
    images = InMemoryImageStore()
    photo = PhotoFactory(user_id=exercise.user_id, exercise_id=exercise.id)
    session.commit()
    service = _service(images, exercise, ctx_for)

    assert [p.public_id for p in service.list_for_exercise(exercise.id)] == [photo.public_id]

    service.delete(exercise.id, photo.public_id)

    assert images.deleted == [photo.public_id]
    assert service.list_for_exercise(exercise.id) == []
    with pytest.raises(NotFoundError):
        service.delete(exercise.id, photo.public_id)


def test_delete_keeps_row_when_image_store_fails(exercise, ctx_for, session):
    photo = PhotoFactory(user_id=exercise.user_id, exercise_id=exercise.id)
    public_id = photo.public_id
    session.commit()
    images = InMemoryImageStore(fail_on={public_id})

    with pytest.raises(ExternalServiceError):
        _service(images, exercise, ctx_for).delete(exercise.id, public_id)
    assert session.query(Photo).filter_by(public_id=public_id).count() == 1
