# myroutine/services/users/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError

from myroutine.models.feedback import Feedback
from myroutine.services._shared.base import BaseService, ServiceContext
from myroutine.services._shared.errors import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ServiceError,
)
from myroutine.services._shared.ports.image_store import ImageStore
from myroutine.services.users.dto import FeedbackOut, PhotoUpload, UserOut

log = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Profile reads and writes for the authenticated user.

    Account deletion lives in
    :class:`~myroutine.services.cascade.service.AggregateDeletionService`.
    """

    def __init__(
        self,
        *,
        image_store: ImageStore | None = None,
        default_profile_photo_id: str | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.images = image_store
        self.default_profile_photo_id = default_profile_photo_id

    def get_profile(self) -> UserOut:
        """
        :raises NotFoundError: When the acting user no longer exists.
        """
        user_id = self.require_actor()
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserOut.from_model(user)

    def update_profile(
        self, fields: Mapping[str, Any], photo: PhotoUpload | None = None
    ) -> UserOut:
        """
        Apply a partial profile update, optionally replacing the profile photo.

        The new photo is uploaded first; if the database write then fails the
        upload is deleted again. The previous photo is deleted only after the
        commit, and never when it is the shared default image.

        :raises ServiceError: When neither fields nor a photo are given.
        :raises ConflictError: When the new email is already taken.
        :raises ExternalServiceError: When the upload fails.
        """
        user_id = self.require_actor()
        if not fields and photo is None:
            raise ServiceError("At least one field is required")

        stored = None
        if photo is not None:
            stored = self._require_images().upload(photo.content, photo.filename)

        previous_photo_id: str | None = None
        try:
            with self.rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)
                updates = dict(fields)
                email = updates.get("email")
                if email and email.strip().lower() != user.email and uow.users.exists_by_email(email):
                    raise ConflictError("User", "email already registered")
                if stored is not None:
                    previous_photo_id = user.profile_photo_public_id
                    updates["profile_photo_public_id"] = stored.external_id
                    updates["profile_photo_url"] = stored.url
                uow.users.assign_updates(user, updates)
                out = UserOut.from_model(user)
        except IntegrityError as ie:
            self._discard_upload(stored)
            raise ConflictError("User", "email already registered") from ie
        except Exception:
            self._discard_upload(stored)
            raise

        if previous_photo_id and previous_photo_id != self.default_profile_photo_id:
            try:
                self._require_images().delete(previous_photo_id)
            except ExternalServiceError as exc:
                log.warning("Old profile photo not deleted", extra={"reason": str(exc)})
        return out

    def add_feedback(self, comment: str) -> FeedbackOut:
        user_id = self.require_actor()
        with self.rw_uow() as uow:
            row = uow.feedback.add(Feedback(user_id=user_id, comment=comment.strip()))
            return FeedbackOut.from_model(row)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _require_images(self) -> ImageStore:
        if self.images is None:
            raise RuntimeError("UserService requires an image store for photo operations.")
        return self.images

    def _discard_upload(self, stored) -> None:
        if stored is None:
            return
        try:
            self._require_images().delete(stored.external_id)
        except ExternalServiceError as exc:
            log.warning("Orphaned upload not deleted", extra={"reason": str(exc)})
