"""User, role and permission models backing the user directory."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tokenauth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


def _require_name(value: str, label: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{label} is required.")
    v = value.strip()
    if not v:
        raise ValueError(f"{label} is required.")
    # Scope entries are space-delimited on the wire
    if any(ch.isspace() for ch in v):
        raise ValueError(f"{label} must not contain whitespace.")
    return v


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Identity whose roles are embedded in issued tokens.

    Credentials are out of scope: this table only maps a unique ``username``
    (the token subject) to an ordered list of roles.

    Fields
    ------
    username : str
        Unique name used as the ``sub`` claim.
    user_roles : list[UserRole]
        Ordered association rows; ``position`` preserves grant order.
    roles : list[Role]
        Proxy over ``user_roles``; appending a role creates the association.
    """

    __tablename__ = "users"
    __repr_attrs__ = ("username",)

    username: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        Index("ix_users_username", "username"),
    )

    user_roles: Mapped[list[UserRole]] = relationship(
        "UserRole",
        back_populates="user",
        order_by="UserRole.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    roles: AssociationProxy[list[Role]] = association_proxy(
        "user_roles", "role", creator=lambda role: UserRole(role=role)
    )

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        return _require_name(value, "Username")


class Role(PKMixin, ReprMixin, db.Model):
    """Named role carrying an ordered list of permissions."""

    __tablename__ = "roles"
    __repr_attrs__ = ("name",)

    name: Mapped[str] = mapped_column(String(80), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_roles_name"),)

    role_permissions: Mapped[list[RolePermission]] = relationship(
        "RolePermission",
        back_populates="role",
        order_by="RolePermission.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    permissions: AssociationProxy[list[Permission]] = association_proxy(
        "role_permissions",
        "permission",
        creator=lambda permission: RolePermission(permission=permission),
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        return _require_name(value, "Role name")


class Permission(PKMixin, ReprMixin, db.Model):
    """Fine-grained permission name (e.g. ``DeleteUser``)."""

    __tablename__ = "permissions"
    __repr_attrs__ = ("name",)

    name: Mapped[str] = mapped_column(String(80), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_permissions_name"),)

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        return _require_name(value, "Permission name")


class UserRole(db.Model):
    """Association object linking users to roles with an explicit order."""

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped[User] = relationship("User", back_populates="user_roles")
    role: Mapped[Role] = relationship("Role")

    def __repr__(self) -> str:
        return f"<UserRole user_id={self.user_id} role_id={self.role_id} pos={self.position}>"


class RolePermission(db.Model):
    """Association object linking roles to permissions with an explicit order."""

    __tablename__ = "role_permissions"

    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    permission_id: Mapped[int] = mapped_column(
        ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    role: Mapped[Role] = relationship("Role", back_populates="role_permissions")
    permission: Mapped[Permission] = relationship("Permission")

    def __repr__(self) -> str:
        return (
            f"<RolePermission role_id={self.role_id} "
            f"permission_id={self.permission_id} pos={self.position}>"
        )
