"""RFC 7807 (``application/problem+json``) error responses.

Token rejections arrive here as :class:`Unauthorized` with
``details.reason`` set to the failure kind, so clients can tell an expired
access window (refresh now) from a revoked token (log in again).
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from tokenauth.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"


def status_code_name(status: int) -> str:
    """``401 -> "unauthorized"``; unknown codes map to ``"error"``."""
    try:
        return HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "error"


def problem_response(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build a problem+json response tuple.

    :param status: HTTP status code.
    :param code: Stable machine-readable code.
    :param message: Client-safe summary (``detail``).
    :param details: Optional structured extras, omitted when empty.
    :returns: ``(response, status)`` ready to return from a handler.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if has_request_context() else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    resp = jsonify(problem)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, status


class APIError(Exception):
    """
    An error the API reports to clients as-is.

    :param message: Client-safe description.
    :param status_code: HTTP status, ``400`` by default.
    :param code: Machine-readable identifier.
    :param details: Structured payload, e.g. ``{"reason": "expired"}``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class Unauthorized(APIError):
    """401 when a token cannot be accepted."""

    def __init__(
        self, message: str = "Unauthorized", details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, HTTPStatus.UNAUTHORIZED, "unauthorized", details)


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, HTTPStatus.NOT_FOUND, "not_found")


def init_app(app: Flask) -> None:
    """Register problem+json handlers; 5xx are logged with tracebacks, 4xx as warnings."""

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "api_error code=%s status=%s",
            err.code,
            err.status_code,
            extra={"reason": err.details.get("reason"), "endpoint": request.endpoint},
        )
        return problem_response(err.status_code, err.code, err.message, err.details)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = status_code_name(status)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        (log.error if status >= 500 else log.warning)("http_error code=%s status=%s", code, status)
        return problem_response(status, code, message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("validation_error", extra={"endpoint": request.endpoint})
        return problem_response(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            {"errors": err.messages},
        )

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("database unavailable", exc_info=True)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE, "service_unavailable", "Service temporarily unavailable"
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled exception", exc_info=True)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
