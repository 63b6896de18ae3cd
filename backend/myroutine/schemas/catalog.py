"""Day, muscle group and photo schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class ScheduleSchema(Schema):
    """Payload scheduling a routine on a weekday."""

    id_routine = fields.Integer(required=True)
    id_day = fields.Integer(required=True)


class DaySchema(Schema):
    id_day = fields.Integer(required=True)
    day_name = fields.String(required=True)


class MuscleGroupSchema(Schema):
    id_muscle_group = fields.Integer(required=True)
    muscle_group_name = fields.String(required=True)


class PhotoSchema(Schema):
    public_id = fields.String(required=True)
    id_exercise = fields.Integer(required=True)
    url = fields.String(required=True)
    created_at = fields.DateTime(allow_none=True)
