"""Token rotation: invalidate the presented token, mint its replacement."""

from __future__ import annotations

import logging

from tokenauth.services._shared.base import BaseService, Clock
from tokenauth.services._shared.ports import (
    InsertResult,
    InvalidatedTokenStore,
    UserDirectory,
)
from tokenauth.services.tokens.dto import AuthOut, RefreshIn, VerifyMode
from tokenauth.services.tokens.errors import RefreshFailedError, TokenInvalidatedError
from tokenauth.services.tokens.issuer import TokenIssuer
from tokenauth.services.tokens.verifier import TokenVerifier

log = logging.getLogger(__name__)


class TokenRefresher(BaseService):
    """
    Exchange a token that is still inside its refresh window for a new one.

    Steps
    -----
    1. Verify in REFRESH mode (failures propagate unchanged).
    2. Insert the old id into the store; losing the insert race means the
       token was already rotated, reported as ``INVALIDATED``.
    3. Read current roles from the directory; the old scope is discarded.
    4. Sign the replacement.

    A failure in steps 3 or 4 surfaces as :class:`RefreshFailedError`. The
    revocation from step 2 stands.
    """

    def __init__(
        self,
        *,
        verifier: TokenVerifier,
        issuer: TokenIssuer,
        store: InvalidatedTokenStore,
        directory: UserDirectory,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(clock=clock)
        self.verifier = verifier
        self.issuer = issuer
        self.store = store
        self.directory = directory

    def refresh(self, dto: RefreshIn) -> AuthOut:
        """
        Rotate ``dto.token``.

        :param dto: Refresh input carrying the encoded token.
        :type dto: RefreshIn
        :returns: The replacement token and its access expiry.
        :rtype: AuthOut
        :raises TokenError: Any verification failure, ``INVALIDATED`` on a
            lost race, or ``REFRESH_FAILED`` after the old token was revoked.
        """
        claims = self.verifier.verify(dto.token, VerifyMode.REFRESH)

        if self.store.insert(claims.id, claims.expiration) == InsertResult.ALREADY_EXISTS:
            log.warning(
                "token.refresh.replayed",
                extra={"jti": claims.id, "subject": claims.subject},
            )
            raise TokenInvalidatedError()

        try:
            roles = self.directory.current_roles_and_permissions(claims.subject)
            new_claims = self.issuer.build_claims(claims.subject, roles)
            token = self.issuer.sign(new_claims)
        except Exception as exc:
            log.error(
                "token.refresh.failed",
                exc_info=True,
                extra={"jti": claims.id, "subject": claims.subject},
            )
            raise RefreshFailedError() from exc

        log.info(
            "token.refreshed",
            extra={"jti": new_claims.id, "subject": new_claims.subject},
        )
        return AuthOut(jwt=token, expiry_time=new_claims.expiration)
