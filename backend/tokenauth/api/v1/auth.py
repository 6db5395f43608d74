"""Token endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from tokenauth.api.deps import current_claims, current_token, json_response, require_auth, timing
from tokenauth.core.token_auth import get_token_components
from tokenauth.schemas import AuthResponseSchema, RefreshRequestSchema, WhoAmISchema
from tokenauth.services.tokens.dto import RefreshIn
from tokenauth.services.tokens.errors import TokenError

bp = Blueprint("auth", __name__)

refresh_schema = RefreshRequestSchema()
auth_schema = AuthResponseSchema()
whoami_schema = WhoAmISchema()


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a token inside its refresh window for a new one."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    refresher = get_token_components().refresher
    try:
        result = refresher.refresh(RefreshIn(token=data["token"]))
    except TokenError as exc:
        raise refresher.translate_exceptions(exc) from exc
    return json_response(auth_schema.dump(result))


@bp.get("/me")
@require_auth
@timing
def whoami():
    """Describe the caller from the verified access token."""

    claims = current_claims()
    verifier = get_token_components().verifier
    body = {
        "username": claims.subject,
        "roles": verifier.extract_roles(current_token()),
        "expires_at": claims.expiration,
    }
    return json_response(whoami_schema.dump(body))
