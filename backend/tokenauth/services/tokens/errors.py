"""Token failure taxonomy.

Every per-request rejection raised by the verifier or the refresher is a
:class:`TokenError` carrying a stable :class:`TokenFailure` kind. The HTTP
layer reports ``kind.value`` as the ``reason`` of a 401 problem document.
"""

from __future__ import annotations

from enum import Enum

from tokenauth.services._shared.errors import ServiceError


class TokenFailure(str, Enum):
    MALFORMED = "malformed"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    REFRESH_WINDOW_EXPIRED = "refresh_window_expired"
    INVALIDATED = "invalidated"
    INVALID = "invalid"
    REFRESH_FAILED = "refresh_failed"


class TokenError(ServiceError):
    """
    Base class for token rejections.

    :param message: Client-safe description. Never contains the token itself.
    :type message: str | None
    """

    kind: TokenFailure = TokenFailure.INVALID
    default_message = "Token is invalid"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class MalformedTokenError(TokenError):
    """Not a compact JWS: wrong segment count, bad base64url or bad header JSON."""

    kind = TokenFailure.MALFORMED
    default_message = "Token is malformed"


class SignatureInvalidError(TokenError):
    """HS256 signature does not match the configured secret."""

    kind = TokenFailure.SIGNATURE_INVALID
    default_message = "Token signature is invalid"


class TokenExpiredError(TokenError):
    """Access window has elapsed."""

    kind = TokenFailure.EXPIRED
    default_message = "Token has expired"


class RefreshWindowExpiredError(TokenError):
    """Refresh window (measured from issuance) has elapsed."""

    kind = TokenFailure.REFRESH_WINDOW_EXPIRED
    default_message = "Token can no longer be refreshed"


class TokenInvalidatedError(TokenError):
    """Token id has been recorded in the revocation store."""

    kind = TokenFailure.INVALIDATED
    default_message = "Token has been invalidated"


class InvalidTokenError(TokenError):
    """Signed correctly but unusable: missing or ill-typed claims, wrong issuer."""

    kind = TokenFailure.INVALID


class RefreshFailedError(TokenError):
    """
    The old token was invalidated but no replacement could be issued.

    Raised chained to the underlying cause. The revocation is not undone, so
    the caller must authenticate again.
    """

    kind = TokenFailure.REFRESH_FAILED
    default_message = "Token refresh failed; please authenticate again"


__all__ = [
    "TokenFailure",
    "TokenError",
    "MalformedTokenError",
    "SignatureInvalidError",
    "TokenExpiredError",
    "RefreshWindowExpiredError",
    "TokenInvalidatedError",
    "InvalidTokenError",
    "RefreshFailedError",
]
