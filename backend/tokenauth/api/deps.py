"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from tokenauth.core.errors import Unauthorized
from tokenauth.core.token_auth import get_token_components
from tokenauth.services.tokens.claims import ClaimModel
from tokenauth.services.tokens.dto import VerifyMode
from tokenauth.services.tokens.errors import TokenError

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def bearer_token() -> str:
    """Return the raw token from ``Authorization: Bearer <token>``.

    :raises Unauthorized: If the header is absent or uses another scheme.
    """
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        raise Unauthorized("Missing bearer token")
    token = header[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized("Missing bearer token")
    return token


def current_claims() -> ClaimModel:
    """Claims verified by :func:`require_auth` for this request."""
    return g.token_claims


def current_token() -> str:
    return g.token


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, unrevoked access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = bearer_token()
        verifier = get_token_components().verifier
        try:
            g.token_claims = verifier.verify(token, VerifyMode.ACCESS)
        except TokenError as exc:
            raise verifier.translate_exceptions(exc) from exc
        g.token = token
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
