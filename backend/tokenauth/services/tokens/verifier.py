"""Token verification and read-only claim accessors."""

from __future__ import annotations

import binascii
import logging
from datetime import datetime

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode

from tokenauth.core.config import TokenSettings
from tokenauth.services._shared.base import BaseService, Clock
from tokenauth.services._shared.ports import InvalidatedTokenStore
from tokenauth.services.tokens.claims import ISSUER, ClaimModel
from tokenauth.services.tokens.dto import VerifyMode
from tokenauth.services.tokens.errors import (
    InvalidTokenError,
    MalformedTokenError,
    RefreshWindowExpiredError,
    SignatureInvalidError,
    TokenError,
    TokenExpiredError,
    TokenInvalidatedError,
)
from tokenauth.services.tokens.issuer import ALGORITHM

log = logging.getLogger(__name__)

_HS256 = HMACAlgorithm(HMACAlgorithm.SHA256)

# Temporal checks use the injected clock, never PyJWT's wall clock.
DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "require": ["sub", "jti", "iss", "iat", "exp"],
}


class TokenVerifier(BaseService):
    """
    Check tokens in a fixed order: parse, signature, time window, revocation.

    :param settings: Signing secret and lifetimes.
    :type settings: TokenSettings
    :param store: Revocation store consulted last.
    :type store: InvalidatedTokenStore
    :param clock: Source of "now".
    :type clock: Clock | None
    """

    def __init__(
        self,
        settings: TokenSettings,
        store: InvalidatedTokenStore,
        *,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(clock=clock)
        self.settings = settings
        self.store = store

    # ------------------------------ Verification ------------------------------

    def verify(self, token: str, mode: VerifyMode = VerifyMode.ACCESS) -> ClaimModel:
        """
        Verify ``token`` and return its claims.

        ACCESS mode rejects ``now > expiration``; REFRESH mode instead rejects
        ``now > issued_at + refresh_ttl``, so an access-expired token can
        still be refreshed. The revocation store is consulted last in both
        modes.

        :raises MalformedTokenError: Not a compact JWS.
        :raises SignatureInvalidError: Signature mismatch.
        :raises TokenExpiredError: ACCESS mode, access window elapsed.
        :raises RefreshWindowExpiredError: REFRESH mode, refresh window elapsed.
        :raises TokenInvalidatedError: Token id is in the revocation store.
        :raises InvalidTokenError: Any other claim problem.
        """
        try:
            claims = self._decode(token)
            now = self.now()
            if mode is VerifyMode.REFRESH:
                if now > claims.issued_at + self.settings.refresh_ttl:
                    raise RefreshWindowExpiredError()
            elif now > claims.expiration:
                raise TokenExpiredError()
            if self.store.exists(claims.id):
                raise TokenInvalidatedError()
        except TokenError as exc:
            log.debug(
                "token.rejected",
                extra={"reason": exc.kind.value, "mode": mode.value},
            )
            raise
        return claims

    # ------------------------------ Accessors ---------------------------------
    # Signature-checked, but blind to time windows and revocation.

    def parse(self, token: str) -> ClaimModel:
        return self._decode(token)

    def extract_username(self, token: str) -> str:
        return self._decode(token).subject

    def extract_roles(self, token: str) -> list[str]:
        """Return scope entries with roles and permissions undifferentiated."""
        return self._decode(token).scope_entries

    def extract_expiration(self, token: str) -> datetime:
        return self._decode(token).expiration

    def is_expired(self, token: str) -> bool:
        """Access-window check only; a revoked token may still report ``False``."""
        return self.extract_expiration(token) < self.now()

    def validate_token(self, token: str, username: str) -> bool:
        """Return ``True`` when ``token`` belongs to ``username`` and is not expired."""
        return self.extract_username(token) == username and not self.is_expired(token)

    # ------------------------------ Internals ---------------------------------

    def _decode(self, token: str) -> ClaimModel:
        if not isinstance(token, str) or token.count(".") != 2:
            raise MalformedTokenError()
        try:
            jwt.get_unverified_header(token)
        except jwt.PyJWTError as exc:
            raise MalformedTokenError() from exc
        try:
            payload = jwt.decode(
                token,
                self.settings.signing_secret,
                algorithms=[ALGORITHM],
                issuer=ISSUER,
                options=DECODE_OPTIONS,
            )
        except jwt.DecodeError as exc:
            # Covers InvalidSignatureError and undecodable payload segments.
            raise self._classify_decode_failure(token) from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc
        try:
            return ClaimModel.from_payload(payload)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise InvalidTokenError() from exc

    def _classify_decode_failure(self, token: str) -> TokenError:
        """
        Decide whether a token with a readable header failed on its signature.

        The signature is recomputed over the raw ``header.payload`` text, so a
        payload segment that no longer base64-decodes still counts as tampering
        unless the signature over it actually matches.
        """
        signing_input, _, signature_segment = token.rpartition(".")
        try:
            signature = base64url_decode(signature_segment)
        except (binascii.Error, ValueError):
            return SignatureInvalidError()
        key = _HS256.prepare_key(self.settings.signing_secret)
        if _HS256.verify(signing_input.encode("utf-8"), key, signature):
            return MalformedTokenError()
        return SignatureInvalidError()
