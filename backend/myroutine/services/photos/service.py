# myroutine/services/photos/service.py
from __future__ import annotations

import logging

from myroutine.models.exercise import Photo
from myroutine.services._shared.base import BaseService, ServiceContext
from myroutine.services._shared.errors import ExternalServiceError, NotFoundError
from myroutine.services._shared.ports.image_store import ImageStore, StoredImage
from myroutine.services.photos.dto import PhotoOut
from myroutine.services.users.dto import PhotoUpload

log = logging.getLogger(__name__)


class PhotoService(BaseService):
    """
    Exercise photos. The image bytes live in the external image store and
    the ``photos`` table keeps the public id and URL.
    """

    def __init__(self, *, image_store: ImageStore, ctx: ServiceContext | None = None) -> None:
        super().__init__(ctx=ctx)
        self.images = image_store

    def upload(self, exercise_id: int, photo: PhotoUpload) -> PhotoOut:
        """
        Upload a photo and attach it to an exercise.

        :raises NotFoundError: When the exercise is not the user's.
        :raises ExternalServiceError: When the image store rejects the upload.
        """
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.exercises.get_for_user(user_id, exercise_id) is None:
                raise NotFoundError("Exercise", exercise_id)

        stored = self.images.upload(photo.content, photo.filename)
        try:
            with self.rw_uow() as uow:
                row = uow.photos.add(
                    Photo(
                        user_id=user_id,
                        exercise_id=exercise_id,
                        public_id=stored.external_id,
                        url=stored.url,
                    )
                )
                out = PhotoOut.from_model(row)
        except Exception:
            self._discard(stored)
            raise
        return out

    def list_for_exercise(self, exercise_id: int) -> list[PhotoOut]:
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.exercises.get_for_user(user_id, exercise_id) is None:
                raise NotFoundError("Exercise", exercise_id)
            return [PhotoOut.from_model(r) for r in uow.photos.list_by_exercise(user_id, exercise_id)]

    def delete(self, exercise_id: int, public_id: str) -> None:
        """
        Delete the hosted image, then its row.

        :raises NotFoundError: When the photo is not attached to the user's exercise.
        :raises ExternalServiceError: When the image store fails; the row is kept.
        """
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            row = uow.photos.find_in_exercise(user_id, exercise_id, public_id)
            if row is None:
                raise NotFoundError("Photo", public_id)
            self.images.delete(public_id)
            uow.photos.delete(row)

    def _discard(self, stored: StoredImage) -> None:
        try:
            self.images.delete(stored.external_id)
        except ExternalServiceError as exc:
            log.warning("Orphaned upload not deleted", extra={"reason": str(exc)})
