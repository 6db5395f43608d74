"""Token minting: claim construction and HS256 signing."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from uuid import uuid4

import jwt

from tokenauth.core.config import TokenSettings
from tokenauth.services._shared.base import BaseService, Clock
from tokenauth.services.tokens.claims import ISSUER, ClaimModel, RoleGrant, build_scope

log = logging.getLogger(__name__)

ALGORITHM = "HS256"


def new_token_id() -> str:
    """Return a fresh 128-bit random token id as 32 hex characters."""
    return uuid4().hex


class TokenIssuer(BaseService):
    """
    Mint signed access tokens.

    :param settings: Signing secret and lifetimes.
    :type settings: TokenSettings
    :param clock: Source of "now"; defaults to the system UTC clock.
    :type clock: Clock | None
    :param id_factory: Source of token ids; defaults to :func:`new_token_id`.
    :type id_factory: Callable[[], str] | None
    """

    def __init__(
        self,
        settings: TokenSettings,
        *,
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(clock=clock)
        self.settings = settings
        self._new_id = id_factory or new_token_id

    def build_claims(self, identity: str, roles: Sequence[RoleGrant]) -> ClaimModel:
        """
        Build the claim set for a new token.

        ``issued_at`` is truncated to whole seconds so that the signed
        ``exp - iat`` equals the access TTL exactly.

        :raises ValueError: If ``identity`` is empty.
        """
        issued_at = self.now().replace(microsecond=0)
        return ClaimModel(
            subject=identity,
            id=self._new_id(),
            issuer=ISSUER,
            issued_at=issued_at,
            expiration=issued_at + self.settings.access_ttl,
            scope=build_scope(roles),
        )

    def sign(self, claims: ClaimModel) -> str:
        """Serialize ``claims`` as a compact HS256 JWS."""
        return jwt.encode(
            claims.to_payload(),
            self.settings.signing_secret,
            algorithm=ALGORITHM,
            headers={"typ": "JWT"},
        )

    def issue(self, identity: str, roles: Sequence[RoleGrant]) -> str:
        """
        Mint a token for ``identity`` carrying ``roles``.

        Roles should be read fresh from the user directory by the caller.

        :param identity: Username; becomes the ``sub`` claim.
        :type identity: str
        :param roles: Ordered role grants flattened into ``scope``.
        :type roles: Sequence[RoleGrant]
        :returns: Compact ``header.payload.signature`` string.
        :rtype: str
        """
        claims = self.build_claims(identity, roles)
        token = self.sign(claims)
        log.info("token.issued", extra={"jti": claims.id, "subject": claims.subject})
        return token
