"""Routine endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from myroutine.api.deps import cached, require_session, service_context, success, timing
from myroutine.schemas import (
    ListQuerySchema,
    MessageSchema,
    RoutineCreateSchema,
    RoutineExerciseSchema,
    RoutineSchema,
    RoutineUpdateSchema,
)
from myroutine.services.routines.dto import RoutineCreateIn, RoutineListIn
from myroutine.services.routines.service import RoutineService

bp = Blueprint("routines", __name__)

routine_schema = RoutineSchema()
routine_list_schema = RoutineSchema(many=True)
routine_create_schema = RoutineCreateSchema()
routine_update_schema = RoutineUpdateSchema()
routine_exercise_schema = RoutineExerciseSchema()
list_query_schema = ListQuerySchema()
message_schema = MessageSchema()


def _service() -> RoutineService:
    return RoutineService(ctx=service_context())


@bp.post("")
@require_session
@timing
def create_routine():
    payload = routine_create_schema.load(request.get_json(silent=True) or {})
    out = _service().create(RoutineCreateIn(**payload))
    return success(routine_schema.dump(out), status=201)


@bp.get("")
@require_session
@cached
@timing
def list_routines():
    query = list_query_schema.load(request.args)
    items = _service().list(RoutineListIn(**query))
    return success(routine_list_schema.dump(items))


@bp.get("/<int:routine_id>")
@require_session
@cached
@timing
def get_routine(routine_id: int):
    return success(routine_schema.dump(_service().get(routine_id)))


@bp.put("/<int:routine_id>")
@require_session
@timing
def update_routine(routine_id: int):
    fields = routine_update_schema.load(request.get_json(silent=True) or {})
    return success(routine_schema.dump(_service().update(routine_id, fields)))


@bp.delete("/<int:routine_id>")
@require_session
@timing
def delete_routine(routine_id: int):
    _service().delete(routine_id)
    return success(message_schema.dump({"message": "Routine deleted"}))


@bp.post("/<int:routine_id>/exercise/<int:exercise_id>")
@require_session
@timing
def add_exercise(routine_id: int, exercise_id: int):
    payload = routine_exercise_schema.load(request.get_json(silent=True) or {})
    _service().add_exercise(routine_id, exercise_id, payload["exercise_order"])
    return success(message_schema.dump({"message": "Exercise added to routine"}), status=201)


@bp.delete("/<int:routine_id>/exercise/<int:exercise_id>")
@require_session
@timing
def remove_exercise(routine_id: int, exercise_id: int):
    _service().remove_exercise(routine_id, exercise_id)
    return success(message_schema.dump({"message": "Exercise removed from routine"}))


@bp.get("/exercise/<int:exercise_id>")
@require_session
@cached
@timing
def list_exercise_routines(exercise_id: int):
    items = _service().list_for_exercise(exercise_id)
    return success(routine_list_schema.dump(items))
