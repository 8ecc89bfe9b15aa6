"""Marshmallow schemas for video comments."""

from __future__ import annotations

from marshmallow import Schema, fields, pre_load, validate

COMMENT_MAX_LENGTH = 1000
# Largest value the Numeric(10, 2) timestamp column holds.
TIMESTAMP_MAX = 99_999_999.99


class _StrippedSchema(Schema):
    """Strip surrounding whitespace from every string input before validation."""

    @pre_load
    def _strip_strings(self, data, **kwargs):  # type: ignore[no-untyped-def]
        if not isinstance(data, dict):
            return data
        return {key: value.strip() if isinstance(value, str) else value for key, value in data.items()}


class CommentListQuerySchema(_StrippedSchema):
    """Validate the list query string."""

    video_id = fields.Str(required=True, validate=validate.Length(min=1))


class CommentCreateSchema(_StrippedSchema):
    """Validate create payload: ``{video_id, comment, timestamp}``."""

    video_id = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    text = fields.Str(
        required=True,
        data_key="comment",
        validate=validate.Length(min=1, max=COMMENT_MAX_LENGTH),
    )
    timestamp = fields.Float(required=True, allow_nan=False, validate=validate.Range(min=0, max=TIMESTAMP_MAX))


class CommentSchema(Schema):
    """Serialize an enriched comment view."""

    id = fields.Int(required=True)
    username = fields.Str(required=True)
    user_id = fields.Int(required=True)
    text = fields.Str(required=True)
    timestamp = fields.Float(required=True)
    timestamp_formatted = fields.Str(required=True)
    created_at = fields.DateTime(required=True)
