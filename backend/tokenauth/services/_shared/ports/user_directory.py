from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from tokenauth.services._shared.errors import NotFoundError
from tokenauth.services.tokens.claims import RoleGrant


class UserDirectory(Protocol):
    """
    Read-only view of a user's current authorization.

    Implementations return plain :class:`RoleGrant` values (never ORM
    objects) ordered as granted, and raise :class:`NotFoundError` for an
    unknown subject.
    """

    def current_roles_and_permissions(self, subject: str) -> Sequence[RoleGrant]: ...


class InMemoryUserDirectory(UserDirectory):
    """Dictionary-backed directory used by unit tests and the CLI smoke path."""

    def __init__(self, users: Mapping[str, Sequence[RoleGrant]] | None = None) -> None:
        self._users: dict[str, tuple[RoleGrant, ...]] = {
            name: tuple(grants) for name, grants in (users or {}).items()
        }

    def set_roles(self, subject: str, roles: Sequence[RoleGrant]) -> None:
        self._users[subject] = tuple(roles)

    def current_roles_and_permissions(self, subject: str) -> Sequence[RoleGrant]:
        try:
            return self._users[subject]
        except KeyError:
            raise NotFoundError("User", subject) from None
