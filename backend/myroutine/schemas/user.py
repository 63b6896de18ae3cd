"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class UserUpdateSchema(Schema):
    """Partial profile update; every field is optional."""

    email = fields.Email(validate=validate.Length(max=254))
    name = fields.String(validate=validate.Length(min=1, max=100))
    last_name = fields.String(validate=validate.Length(min=1, max=100))
    username = fields.String(validate=validate.Length(min=1, max=50))
    date_birth = fields.Date(allow_none=True)
    theme = fields.String(validate=validate.Length(max=20))
    experience = fields.String(validate=validate.Length(max=50))
    weight_unit = fields.String(validate=validate.OneOf(["kg", "lb"]))
    goal = fields.String(validate=validate.Length(max=255))
    rating = fields.Integer(allow_none=True, validate=validate.Range(min=1, max=5))


class UserSchema(Schema):
    """Public representation of a user; never carries the id or the password."""

    email = fields.Email(required=True)
    name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    username = fields.String(allow_none=True)
    profile_photo = fields.String(allow_none=True)
    date_birth = fields.Date(allow_none=True)
    theme = fields.String(allow_none=True)
    experience = fields.String(allow_none=True)
    weight_unit = fields.String(allow_none=True)
    goal = fields.String(allow_none=True)
    rating = fields.Integer(allow_none=True)


class FeedbackCreateSchema(Schema):
    comment = fields.String(required=True, validate=validate.Length(min=1, max=2000))


class FeedbackSchema(Schema):
    id_feedback = fields.Integer(required=True)
    comment = fields.String(required=True)
    created_at = fields.DateTime(allow_none=True)
