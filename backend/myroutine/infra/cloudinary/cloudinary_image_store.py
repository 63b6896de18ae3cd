# myroutine/infra/cloudinary/cloudinary_image_store.py
from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Mapping
from typing import Any

import requests

from myroutine.services._shared.errors import ExternalServiceError
from myroutine.services._shared.ports.image_store import ImageStore, StoredImage

log = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"


class CloudinaryImageStore(ImageStore):
    """
    Cloudinary upload/destroy over the signed REST API.

    Signatures follow Cloudinary's scheme: SHA-1 of the ``&``-joined, sorted
    ``key=value`` parameters followed by the API secret.
    """

    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> CloudinaryImageStore:
        return cls(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME", ""),
            api_key=config.get("CLOUDINARY_API_KEY", ""),
            api_secret=config.get("CLOUDINARY_API_SECRET", ""),
            folder=config.get("CLOUDINARY_FOLDER") or None,
            timeout=float(config.get("HTTP_TIMEOUT", 10)),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _url(self, action: str) -> str:
        return f"{API_BASE}/{self.cloud_name}/image/{action}"

    def sign(self, params: Mapping[str, Any]) -> str:
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()  # noqa: S324

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        params["signature"] = self.sign(params)
        params["api_key"] = self.api_key
        return params

    def _post(self, action: str, data: dict[str, Any], files: Any = None) -> dict[str, Any]:
        try:
            r = requests.post(self._url(action), data=data, files=files, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ExternalServiceError("image_store", f"{action} request failed") from exc
        body = r.json() if r.content else {}
        if r.status_code < 200 or r.status_code >= 300:
            msg = ((body.get("error") or {}).get("message") or f"HTTP {r.status_code}").strip()
            raise ExternalServiceError("image_store", f"{action} failed: {msg}")
        return body

    # ------------------------------------------------------------------ #
    # Port
    # ------------------------------------------------------------------ #

    def upload(self, file: bytes | str, filename: str | None = None) -> StoredImage:
        """
        Upload raw bytes or a remote URL.

        :raises ExternalServiceError: On transport or API failure.
        """
        data = self._signed({"folder": self.folder})
        if isinstance(file, str):
            data["file"] = file
            body = self._post("upload", data)
        else:
            body = self._post("upload", data, files={"file": (filename or "upload", file)})

        public_id = body.get("public_id")
        url = body.get("secure_url") or body.get("url")
        if not public_id or not url:
            raise ExternalServiceError("image_store", "upload response missing public_id/url")
        return StoredImage(external_id=public_id, url=url)

    def delete(self, external_id: str) -> None:
        """
        Destroy an image. An id Cloudinary does not know counts as deleted.

        :raises ExternalServiceError: On transport or API failure.
        """
        body = self._post("destroy", self._signed({"public_id": external_id}))
        result = body.get("result")
        if result == "not found":
            log.info("Image already absent", extra={"reason": external_id})
            return
        if result != "ok":
            raise ExternalServiceError("image_store", f"destroy returned {result!r}")
