# tokenauth/services/tokens/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class VerifyMode(str, Enum):
    """Which temporal rule :meth:`TokenVerifier.verify` applies."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param token: Encoded JWT to exchange; may be access-expired.
    :type token: str
    """

    token: str


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Output DTO with the replacement token.

    :param jwt: Encoded JWT.
    :type jwt: str
    :param expiry_time: End of the new token's access window.
    :type expiry_time: datetime
    """

    jwt: str
    expiry_time: datetime
