"""Set resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

SET_TYPES = ["time", "repetition"]


class SetCreateSchema(Schema):
    """
    Payload for creating a set.

    ``quantity`` is a duration string for ``time`` sets and a positive
    integer for ``repetition`` sets; the pairing is checked by the service.
    """

    id_exercise = fields.Integer(required=True)
    weight = fields.Float(load_default=None, validate=validate.Range(min=0))
    rest_after_set = fields.String(load_default=None, validate=validate.Length(max=50))
    set_order = fields.Integer(load_default=1, validate=validate.Range(min=1))
    type = fields.String(required=True, validate=validate.OneOf(SET_TYPES))
    quantity = fields.Raw(required=True)


class SetUpdateSchema(Schema):
    weight = fields.Float(allow_none=True, validate=validate.Range(min=0))
    rest_after_set = fields.String(allow_none=True, validate=validate.Length(max=50))
    set_order = fields.Integer(validate=validate.Range(min=1))
    type = fields.String(validate=validate.OneOf(SET_TYPES))
    quantity = fields.Raw()


class SetSchema(Schema):
    id_set = fields.Integer(required=True)
    id_exercise = fields.Integer(required=True)
    weight = fields.Float(allow_none=True)
    rest_after_set = fields.String(allow_none=True)
    set_order = fields.Integer(required=True)
    type = fields.String(allow_none=True)
    quantity = fields.Raw(allow_none=True)
