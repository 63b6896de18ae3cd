"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


class ListQuerySchema(Schema):
    """
    Sorting and filtering parameters shared by list endpoints.

    ``filter_values`` is comma-separated, e.g. ``?filter=intensity&filter_values=1,3``.
    """

    class Meta:
        unknown = EXCLUDE

    sort_by = fields.String(load_default=None)
    order = fields.String(load_default="ASC", validate=validate.OneOf(["ASC", "DESC", "asc", "desc"]))
    filter = fields.String(load_default=None)
    filter_values = fields.String(load_default="")

    @post_load
    def split_values(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.get("filter_values") or ""
        data["filter_values"] = [self._coerce(v.strip()) for v in raw.split(",") if v.strip()]
        data["descending"] = data.pop("order").upper() == "DESC"
        return data

    @staticmethod
    def _coerce(value: str) -> int | bool | str:
        lowered = value.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        try:
            return int(value)
        except ValueError:
            return value


class MessageSchema(Schema):
    """Plain ``{"message": ...}`` payload."""

    message = fields.String(required=True)
