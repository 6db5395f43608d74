"""Token endpoint Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RefreshRequestSchema(Schema):
    """Input payload for exchanging a token."""

    token = fields.String(required=True, validate=validate.Length(min=1, max=8192))


class AuthResponseSchema(Schema):
    """Replacement token and the end of its access window."""

    jwt = fields.String(required=True)
    expiry_time = fields.AwareDateTime(required=True, data_key="expiryTime")


class WhoAmISchema(Schema):
    """Identity details read from the presented access token."""

    username = fields.String(required=True)
    roles = fields.List(fields.String(), required=True)
    expires_at = fields.AwareDateTime(required=True, data_key="expiresAt")
