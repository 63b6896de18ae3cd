# myroutine/services/cascade/service.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from myroutine.services._shared.base import BaseService, ServiceContext
from myroutine.services._shared.errors import (
    ExternalServiceError,
    NotFoundError,
    PersistenceError,
)
from myroutine.services._shared.ports.image_store import ImageStore
from myroutine.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeReport:
    """
    Outcome of a completed cascade.

    :ivar deleted: Rows removed per step, in execution order.
    :ivar purged_images: External image ids deleted from the image store.
    :ivar failed_images: External image ids whose deletion failed and was skipped.
    """

    root: str
    root_id: int
    deleted: dict[str, int] = field(default_factory=dict)
    purged_images: list[str] = field(default_factory=list)
    failed_images: list[str] = field(default_factory=list)

    @property
    def steps(self) -> list[str]:
        return list(self.deleted)


Step = tuple[str, Callable[[SQLAlchemyUnitOfWork], int]]


class AggregateDeletionService(BaseService):
    """
    Delete a user or an exercise together with every row that references it.

    Steps run children-before-parents inside a single unit of work. A store
    failure in any step raises :class:`PersistenceError` naming the step and
    the steps completed before it; the transaction is rolled back, so no
    partial deletion is ever committed. External image deletions cannot be
    rolled back: they are best-effort, and a failure is logged, recorded in
    the report, and skipped.
    """

    def __init__(
        self,
        *,
        image_store: ImageStore,
        default_profile_photo_id: str,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.images = image_store
        self.default_profile_photo_id = default_profile_photo_id

    # ------------------------------------------------------------------ #
    # Delete user
    # ------------------------------------------------------------------ #

    def delete_user(self, user_id: int) -> CascadeReport:
        """
        Remove a user and everything the user owns.

        :raises NotFoundError: When the user does not exist.
        :raises PersistenceError: When a store step fails (all rolled back).
        """
        report = CascadeReport(root="user", root_id=user_id)
        with self.rw_uow() as uow:
            user = self._guard(report, "load_user", lambda: uow.users.get(user_id))
            if user is None:
                raise NotFoundError("User", user_id)
            profile_photo_id = user.profile_photo_public_id

            steps: list[Step] = [
                ("time_sets", lambda u: u.time_sets.delete_by_user(user_id)),
                ("repetition_sets", lambda u: u.repetition_sets.delete_by_user(user_id)),
                ("sets", lambda u: u.sets.delete_by_user(user_id)),
                ("works_on", lambda u: u.works_on.delete_by_user(user_id)),
                (
                    "photo_assets",
                    lambda u: self._purge_photos(report, u.photos.list_by_user(user_id)),
                ),
                ("photos", lambda u: u.photos.delete_by_user(user_id)),
                ("composed_by", lambda u: u.composed_by.delete_by_user(user_id)),
                ("exercises", lambda u: u.exercises.delete_by_user(user_id)),
                ("scheduled_days", lambda u: u.scheduled_days.delete_by_user(user_id)),
                ("routines", lambda u: u.routines.delete_by_user(user_id)),
                ("feedback", lambda u: u.feedback.delete_by_user(user_id)),
                ("invalid_tokens", lambda u: u.invalid_tokens.delete_by_user(user_id)),
                ("credentials", lambda u: u.credentials.delete_by_user(user_id)),
                ("profile_photo", lambda u: self._purge_profile_photo(report, profile_photo_id)),
                ("user", lambda u: u.users.delete_by_id(user_id)),
            ]
            self._run(uow, report, steps)

        log.info(
            "User deleted",
            extra={"user_id": user_id, "count": sum(report.deleted.values())},
        )
        return report

    # ------------------------------------------------------------------ #
    # Delete exercise
    # ------------------------------------------------------------------ #

    def delete_exercise(self, user_id: int, exercise_id: int) -> CascadeReport:
        """
        Remove one of the user's exercises and its sets, links and photos.

        Rows of the user's other exercises are left untouched.

        :raises NotFoundError: When the exercise does not belong to the user.
        :raises PersistenceError: When a store step fails (all rolled back).
        """
        report = CascadeReport(root="exercise", root_id=exercise_id)
        with self.rw_uow() as uow:
            exercise = self._guard(
                report, "load_exercise", lambda: uow.exercises.get_for_user(user_id, exercise_id)
            )
            if exercise is None:
                raise NotFoundError("Exercise", exercise_id)

            def scoped(repo_name: str) -> Callable[[SQLAlchemyUnitOfWork], int]:
                return lambda u: getattr(u, repo_name).delete_by_user_exercise(
                    user_id, exercise_id
                )

            steps: list[Step] = [
                ("time_sets", scoped("time_sets")),
                ("repetition_sets", scoped("repetition_sets")),
                ("sets", scoped("sets")),
                ("works_on", scoped("works_on")),
                (
                    "photo_assets",
                    lambda u: self._purge_photos(
                        report, u.photos.list_by_exercise(user_id, exercise_id)
                    ),
                ),
                ("photos", scoped("photos")),
                ("composed_by", scoped("composed_by")),
                ("exercise", lambda u: u.exercises.delete_for_user(user_id, exercise_id)),
            ]
            self._run(uow, report, steps)

        log.info(
            "Exercise deleted",
            extra={"user_id": user_id, "count": sum(report.deleted.values())},
        )
        return report

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _run(self, uow: SQLAlchemyUnitOfWork, report: CascadeReport, steps: list[Step]) -> None:
        for name, fn in steps:
            count = self._guard(report, name, lambda fn=fn: fn(uow))
            report.deleted[name] = count
            log.debug("Cascade step done", extra={"step": name, "count": count})

    @staticmethod
    def _guard(report: CascadeReport, step: str, fn: Callable[[], object]):
        try:
            return fn()
        except SQLAlchemyError as exc:
            log.error(
                "Cascade step failed",
                extra={"step": step, "reason": type(exc).__name__},
            )
            raise PersistenceError(step=step, completed=report.steps) from exc

    def _purge_image(self, report: CascadeReport, external_id: str) -> bool:
        try:
            self.images.delete(external_id)
        except ExternalServiceError as exc:
            log.warning(
                "Image purge failed; continuing",
                extra={"reason": str(exc), "step": report.root},
            )
            report.failed_images.append(external_id)
            return False
        report.purged_images.append(external_id)
        return True

    def _purge_photos(self, report: CascadeReport, photos: Iterable) -> int:
        return sum(1 for photo in photos if self._purge_image(report, photo.public_id))

    def _purge_profile_photo(self, report: CascadeReport, external_id: str | None) -> int:
        if not external_id or external_id == self.default_profile_photo_id:
            return 0
        return int(self._purge_image(report, external_id))
