"""User repository with role/permission eager loading."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from tokenauth.models.user import Role, RolePermission, User, UserRole
from tokenauth.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never handles tokens; it only resolves users and their grants.
    """

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact username, roles and permissions preloaded.

        :param username: Username (the token subject) to search.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username.strip())
        stmt = self._default_eagerload(stmt)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Load ``user_roles -> role -> role_permissions -> permission`` eagerly."""
        return stmt.options(
            selectinload(User.user_roles)
            .selectinload(UserRole.role)
            .selectinload(Role.role_permissions)
            .selectinload(RolePermission.permission)
        )
