"""Set endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from myroutine.api.deps import cached, require_session, service_context, success, timing
from myroutine.schemas import MessageSchema, SetCreateSchema, SetSchema, SetUpdateSchema
from myroutine.services.sets.dto import SetCreateIn
from myroutine.services.sets.service import SetService

bp = Blueprint("sets", __name__)

set_schema = SetSchema()
set_list_schema = SetSchema(many=True)
set_create_schema = SetCreateSchema()
set_update_schema = SetUpdateSchema()
message_schema = MessageSchema()


def _service() -> SetService:
    return SetService(ctx=service_context())


@bp.post("")
@require_session
@timing
def create_set():
    payload = set_create_schema.load(request.get_json(silent=True) or {})
    out = _service().create(SetCreateIn(**payload))
    return success(set_schema.dump(out), status=201)


@bp.get("/exercise/<int:exercise_id>")
@require_session
@cached
@timing
def list_sets(exercise_id: int):
    items = _service().list_for_exercise(exercise_id)
    return success(set_list_schema.dump(items))


@bp.put("/<int:set_id>/exercise/<int:exercise_id>")
@require_session
@timing
def update_set(set_id: int, exercise_id: int):
    fields = set_update_schema.load(request.get_json(silent=True) or {})
    return success(set_schema.dump(_service().update(set_id, exercise_id, fields)))


@bp.delete("/<int:set_id>/exercise/<int:exercise_id>")
@require_session
@timing
def delete_set(set_id: int, exercise_id: int):
    _service().delete(set_id, exercise_id)
    return success(message_schema.dump({"message": "Set deleted"}))
