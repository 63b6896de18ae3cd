"""Day and muscle group catalog endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from myroutine.api.deps import cached, require_session, service_context, success, timing
from myroutine.schemas import DaySchema, MessageSchema, MuscleGroupSchema, ScheduleSchema
from myroutine.services.catalog.service import CatalogService

days_bp = Blueprint("days", __name__)
muscle_groups_bp = Blueprint("muscle_groups", __name__)

day_list_schema = DaySchema(many=True)
muscle_group_list_schema = MuscleGroupSchema(many=True)
schedule_schema = ScheduleSchema()
message_schema = MessageSchema()


def _service() -> CatalogService:
    return CatalogService(ctx=service_context())


# --------------------------------------------------------------------------- #
# Days
# --------------------------------------------------------------------------- #


@days_bp.get("")
@require_session
@cached
@timing
def list_days():
    return success(day_list_schema.dump(_service().list_days()))


@days_bp.post("/scheduled")
@require_session
@timing
def schedule_routine():
    payload = schedule_schema.load(request.get_json(silent=True) or {})
    _service().schedule(payload["id_routine"], payload["id_day"])
    return success(message_schema.dump({"message": "Routine scheduled"}), status=201)


@days_bp.get("/routine/<int:routine_id>")
@require_session
@cached
@timing
def list_routine_days(routine_id: int):
    return success(day_list_schema.dump(_service().days_of_routine(routine_id)))


@days_bp.delete("/<int:day_id>/routine/<int:routine_id>")
@require_session
@timing
def unschedule_routine(day_id: int, routine_id: int):
    _service().unschedule(routine_id, day_id)
    return success(message_schema.dump({"message": "Routine unscheduled"}))


# --------------------------------------------------------------------------- #
# Muscle groups
# --------------------------------------------------------------------------- #


@muscle_groups_bp.get("")
@require_session
@cached
@timing
def list_muscle_groups():
    return success(muscle_group_list_schema.dump(_service().list_muscle_groups()))


@muscle_groups_bp.post("/<int:muscle_group_id>/exercise/<int:exercise_id>")
@require_session
@timing
def link_muscle_group(muscle_group_id: int, exercise_id: int):
    _service().link_muscle_group(exercise_id, muscle_group_id)
    return success(message_schema.dump({"message": "Muscle group linked"}), status=201)


@muscle_groups_bp.get("/exercise/<int:exercise_id>")
@require_session
@cached
@timing
def list_exercise_muscle_groups(exercise_id: int):
    return success(muscle_group_list_schema.dump(_service().muscle_groups_of_exercise(exercise_id)))


@muscle_groups_bp.delete("/<int:muscle_group_id>/exercise/<int:exercise_id>")
@require_session
@timing
def unlink_muscle_group(muscle_group_id: int, exercise_id: int):
    _service().unlink_muscle_group(exercise_id, muscle_group_id)
    return success(message_schema.dump({"message": "Muscle group unlinked"}))
