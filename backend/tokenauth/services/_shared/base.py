"""Shared service base: clock and exception translation."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from tokenauth.core import errors as api_errors
from tokenauth.services._shared.errors import NotFoundError, ServiceError
from tokenauth.services.tokens.errors import TokenError

Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Own the injectable clock so temporal checks are testable.
    * Centralize error translation to the HTTP layer.

    Notes
    -----
    Services never touch Flask; the API layer calls
    :meth:`translate_exceptions` and re-raises the result.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self.clock: Clock = clock or now_utc

    def now(self) -> datetime:
        """Return the clock reading as a tz-aware UTC datetime."""
        current = self.clock()
        if current.tzinfo is None:
            return current.replace(tzinfo=UTC)
        return current.astimezone(UTC)

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, TokenError):
            # → 401 Unauthorized, reason tells the client which check failed
            return api_errors.Unauthorized(str(exc), details={"reason": exc.kind.value})

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
