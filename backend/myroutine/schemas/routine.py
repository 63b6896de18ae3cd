"""Routine resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RoutineCreateSchema(Schema):
    """Payload for creating a new routine."""

    routine_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(load_default="")
    time_before_start = fields.String(load_default=None, validate=validate.Length(max=50))


class RoutineUpdateSchema(Schema):
    routine_name = fields.String(validate=validate.Length(min=1, max=100))
    description = fields.String()
    time_before_start = fields.String(allow_none=True, validate=validate.Length(max=50))
    usage_count = fields.Integer(validate=validate.Range(min=0))
    is_favorite = fields.Boolean()


class RoutineExerciseSchema(Schema):
    """Optional body when adding an exercise to a routine."""

    exercise_order = fields.Integer(load_default=None, validate=validate.Range(min=1))


class RoutineSchema(Schema):
    """Representation of the routine entity."""

    id_routine = fields.Integer(required=True)
    routine_name = fields.String(required=True)
    description = fields.String(required=True)
    time_before_start = fields.String(allow_none=True)
    usage_count = fields.Integer(required=True)
    is_favorite = fields.Boolean(required=True)
    created_at = fields.DateTime(allow_none=True)
