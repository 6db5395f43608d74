"""Liveness and dependency status."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tokenauth.api.deps import json_response, timing
from tokenauth.core.extensions import db
from tokenauth.core.token_auth import get_token_components

bp = Blueprint("health", __name__)


def _database_ok() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        return False
    return True


@bp.get("/health")
@timing
def healthcheck():
    """Report database reachability and the configured revocation store.

    Always answers 200 so load balancers can tell "up but degraded" from "down".
    """
    db_ok = _database_ok()
    return json_response(
        {
            "status": "ok" if db_ok else "degraded",
            "db": "ok" if db_ok else "fail",
            "token_store": get_token_components().backend,
            "version": current_app.config.get("APP_VERSION", "dev"),
        }
    )
