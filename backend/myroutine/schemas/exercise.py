"""Exercise resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class ExerciseCreateSchema(Schema):
    """Payload for creating a new exercise."""

    exercise_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(load_default="")
    time_after_exercise = fields.String(required=True, validate=validate.Length(min=1, max=50))
    intensity = fields.Integer(required=True, validate=validate.OneOf([1, 2, 3]))


class ExerciseUpdateSchema(Schema):
    exercise_name = fields.String(validate=validate.Length(min=1, max=100))
    description = fields.String()
    time_after_exercise = fields.String(validate=validate.Length(min=1, max=50))
    intensity = fields.Integer(validate=validate.OneOf([1, 2, 3]))
    is_favorite = fields.Boolean()


class ExerciseSchema(Schema):
    """Representation of the exercise entity."""

    id_exercise = fields.Integer(required=True)
    exercise_name = fields.String(required=True)
    description = fields.String(required=True)
    time_after_exercise = fields.String(required=True)
    intensity = fields.Integer(required=True)
    is_favorite = fields.Boolean(required=True)
    created_at = fields.DateTime(allow_none=True)
