"""Exercise endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from myroutine.api.deps import cached, require_session, service_context, success, timing
from myroutine.core.extensions import get_image_store
from myroutine.schemas import (
    ExerciseCreateSchema,
    ExerciseSchema,
    ExerciseUpdateSchema,
    ListQuerySchema,
)
from myroutine.services.cascade.service import AggregateDeletionService
from myroutine.services.exercises.dto import ExerciseCreateIn, ExerciseListIn
from myroutine.services.exercises.service import ExerciseService

bp = Blueprint("exercises", __name__)

exercise_schema = ExerciseSchema()
exercise_list_schema = ExerciseSchema(many=True)
exercise_create_schema = ExerciseCreateSchema()
exercise_update_schema = ExerciseUpdateSchema()
list_query_schema = ListQuerySchema()


def _service() -> ExerciseService:
    return ExerciseService(ctx=service_context())


@bp.post("")
@require_session
@timing
def create_exercise():
    payload = exercise_create_schema.load(request.get_json(silent=True) or {})
    out = _service().create(ExerciseCreateIn(**payload))
    return success(exercise_schema.dump(out), status=201)


@bp.get("")
@require_session
@cached
@timing
def list_exercises():
    """List exercises with optional ``sort_by``/``order`` and ``filter``/``filter_values``."""

    query = list_query_schema.load(request.args)
    items = _service().list(ExerciseListIn(**query))
    return success(exercise_list_schema.dump(items))


@bp.get("/<int:exercise_id>")
@require_session
@cached
@timing
def get_exercise(exercise_id: int):
    return success(exercise_schema.dump(_service().get(exercise_id)))


@bp.put("/<int:exercise_id>")
@require_session
@timing
def update_exercise(exercise_id: int):
    fields = exercise_update_schema.load(request.get_json(silent=True) or {})
    out = _service().update(exercise_id, fields)
    return success(exercise_schema.dump(out))


@bp.delete("/<int:exercise_id>")
@require_session
@timing
def delete_exercise(exercise_id: int):
    """Delete the exercise with its sets, muscle-group links, photos and routine links."""

    report = AggregateDeletionService(
        image_store=get_image_store(),
        default_profile_photo_id=current_app.config["DEFAULT_PROFILE_PHOTO_ID"],
        ctx=service_context(),
    ).delete_exercise(g.user_id, exercise_id)
    return success({"message": "Exercise deleted", "deleted": report.deleted})


@bp.get("/routine/<int:routine_id>")
@require_session
@cached
@timing
def list_routine_exercises(routine_id: int):
    items = _service().list_for_routine(routine_id)
    return success(exercise_list_schema.dump(items))
