"""Exercise photo endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from myroutine.api.deps import cached, require_session, service_context, success, timing
from myroutine.core.errors import APIError
from myroutine.core.extensions import get_image_store
from myroutine.schemas import MessageSchema, PhotoSchema
from myroutine.services.photos.service import PhotoService
from myroutine.services.users.dto import PhotoUpload

bp = Blueprint("photos", __name__)

photo_schema = PhotoSchema()
photo_list_schema = PhotoSchema(many=True)
message_schema = MessageSchema()


def _service() -> PhotoService:
    return PhotoService(image_store=get_image_store(), ctx=service_context())


@bp.post("/exercise/<int:exercise_id>")
@require_session
@timing
def upload_photo(exercise_id: int):
    """Upload the multipart ``photo`` file and attach it to the exercise."""

    upload = request.files.get("photo")
    if upload is None:
        raise APIError("A 'photo' file is required")
    out = _service().upload(exercise_id, PhotoUpload(content=upload.read(), filename=upload.filename))
    return success(photo_schema.dump(out), status=201)


@bp.get("/exercise/<int:exercise_id>")
@require_session
@cached
@timing
def list_photos(exercise_id: int):
    return success(photo_list_schema.dump(_service().list_for_exercise(exercise_id)))


@bp.delete("/<string:public_id>/exercise/<int:exercise_id>")
@require_session
@timing
def delete_photo(public_id: str, exercise_id: int):
    _service().delete(exercise_id, public_id)
    return success(message_schema.dump({"message": "Photo deleted"}))
