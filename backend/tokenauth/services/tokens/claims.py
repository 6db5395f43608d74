"""Typed token payload.

:class:`ClaimModel` is the only shape a token payload takes inside the
service. Conversion to and from the wire dictionary is explicit; timestamps
travel as integer NumericDate seconds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Final

ISSUER: Final[str] = "tokenauth"
ROLE_PREFIX: Final[str] = "ROLE_"


@dataclass(frozen=True, slots=True)
class RoleGrant:
    """
    A role and its permissions, in grant order.

    :param name: Role name (without the ``ROLE_`` prefix).
    :type name: str
    :param permissions: Permission names in order.
    :type permissions: tuple[str, ...]
    :raises ValueError: If a name is empty or contains whitespace.
    """

    name: str
    permissions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Entries must survive the whitespace split in ClaimModel.scope_entries
        for entry in (self.name, *self.permissions):
            if not isinstance(entry, str) or not entry or any(c.isspace() for c in entry):
                raise ValueError(
                    f"role and permission names must be non-blank single words, got {entry!r}"
                )


def build_scope(roles: Iterable[RoleGrant]) -> str:
    """Flatten roles into the space-delimited ``scope`` claim.

    Each role contributes ``ROLE_<name>`` followed by its permissions. Order
    is preserved and nothing is deduplicated.

    >>> build_scope([RoleGrant("Admin", ("DeleteUser",)), RoleGrant("Viewer")])
    'ROLE_Admin DeleteUser ROLE_Viewer'
    """
    parts: list[str] = []
    for role in roles:
        parts.append(f"{ROLE_PREFIX}{role.name}")
        parts.extend(role.permissions)
    return " ".join(parts)


def _to_numeric_date(value: datetime) -> int:
    return int(value.timestamp())


def _from_numeric_date(value: Any) -> datetime:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"NumericDate must be a number, got {type(value).__name__}")
    return datetime.fromtimestamp(int(value), tz=UTC)


@dataclass(frozen=True, slots=True)
class ClaimModel:
    """
    Immutable token payload.

    :param subject: Username the token was issued to (``sub``).
    :param id: Random token id (``jti``), the revocation key.
    :param issuer: Always :data:`ISSUER` for tokens minted here (``iss``).
    :param issued_at: Issue instant, tz-aware UTC, whole seconds (``iat``).
    :param expiration: End of the access window (``exp``).
    :param scope: Space-delimited roles and permissions (``scope``).
    :raises ValueError: If ``subject`` is empty or ``expiration`` is not
        strictly after ``issued_at``.
    """

    subject: str
    id: str
    issuer: str
    issued_at: datetime
    expiration: datetime
    scope: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.subject, str) or not self.subject:
            raise ValueError("subject must be a non-empty string")
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("id must be a non-empty string")
        if self.expiration <= self.issued_at:
            raise ValueError("expiration must be after issued_at")

    @property
    def scope_entries(self) -> list[str]:
        return self.scope.split()

    def to_payload(self) -> dict[str, Any]:
        """Return the JWT claim set using registered claim names."""
        return {
            "sub": self.subject,
            "jti": self.id,
            "iss": self.issuer,
            "iat": _to_numeric_date(self.issued_at),
            "exp": _to_numeric_date(self.expiration),
            "scope": self.scope,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ClaimModel:
        """Build a model from a decoded claim set.

        :raises KeyError: If a required claim is absent.
        :raises TypeError: If a claim has the wrong type.
        :raises ValueError: If the claims violate the model invariants.
        """
        subject = payload["sub"]
        jti = payload["jti"]
        issuer = payload["iss"]
        scope = payload.get("scope", "")
        for name, value in (("sub", subject), ("jti", jti), ("iss", issuer), ("scope", scope)):
            if not isinstance(value, str):
                raise TypeError(f"claim {name!r} must be a string")
        return cls(
            subject=subject,
            id=jti,
            issuer=issuer,
            issued_at=_from_numeric_date(payload["iat"]),
            expiration=_from_numeric_date(payload["exp"]),
            scope=scope,
        )
