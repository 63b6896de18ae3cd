from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from myroutine.services._shared.errors import ExternalServiceError


@dataclass(frozen=True, slots=True)
class StoredImage:
    """Reference to an image held by the external image store."""

    external_id: str
    url: str


class ImageStore(Protocol):
    """
    Port for the external image host.

    Both operations raise
    :class:`~myroutine.services._shared.errors.ExternalServiceError` on
    failure. Deleting an id the store does not know is not a failure.
    """

    def upload(self, file: bytes | str, filename: str | None = None) -> StoredImage: ...

    def delete(self, external_id: str) -> None: ...


class InMemoryImageStore(ImageStore):
    """Image store double keeping uploads in a dict.

    ``fail_on`` holds external ids whose deletion should fail, and
    ``fail_uploads`` makes every upload fail.
    """

    def __init__(self, *, fail_on: set[str] | None = None, fail_uploads: bool = False) -> None:
        self.images: dict[str, bytes | str] = {}
        self.deleted: list[str] = []
        self.fail_on: set[str] = set(fail_on or ())
        self.fail_uploads = fail_uploads

    def upload(self, file: bytes | str, filename: str | None = None) -> StoredImage:
        if self.fail_uploads:
            raise ExternalServiceError("image_store", "upload rejected")
        external_id = f"img_{uuid4().hex[:12]}"
        self.images[external_id] = file
        return StoredImage(
            external_id=external_id,
            url=f"https://images.invalid/{external_id}",
        )

    def delete(self, external_id: str) -> None:
        if external_id in self.fail_on:
            raise ExternalServiceError("image_store", f"destroy failed for {external_id}")
        self.images.pop(external_id, None)
        self.deleted.append(external_id)
