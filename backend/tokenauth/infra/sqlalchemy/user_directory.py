"""Read-only user directory over the ``users/roles/permissions`` tables."""

from __future__ import annotations

from tokenauth.services._shared.errors import NotFoundError
from tokenauth.services.tokens.claims import RoleGrant
from tokenauth.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork


class SQLAlchemyUserDirectory:
    """Resolve a username to its ordered role grants."""

    def current_roles_and_permissions(self, subject: str) -> list[RoleGrant]:
        """
        Return the subject's roles and permissions in grant order.

        :param subject: Username.
        :type subject: str
        :returns: Plain role grants, safe to use after the session closes.
        :rtype: list[RoleGrant]
        :raises NotFoundError: If no user has that username.
        """
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            user = uow.users.get_by_username(subject)
            if user is None:
                raise NotFoundError("User", subject)
            # Copy out before the closing rollback expires the ORM objects
            return [
                RoleGrant(
                    name=link.role.name,
                    permissions=tuple(rp.permission.name for rp in link.role.role_permissions),
                )
                for link in user.user_roles
            ]
