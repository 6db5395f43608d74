"""
Unit tests for SQLAlchemyUserDirectory.
"""

from __future__ import annotations

import pytest

from tests.factories.user import PermissionFactory, RoleFactory, UserFactory
from tokenauth.infra.sqlalchemy.user_directory import SQLAlchemyUserDirectory
from tokenauth.services._shared.errors import NotFoundError
from tokenauth.services.tokens.claims import RoleGrant


def test_returns_grants_in_order(session):
    admin = RoleFactory(
        name="Admin",
        permissions=[PermissionFactory(name="DeleteUser"), PermissionFactory(name="ReadAll")],
    )
    viewer = RoleFactory(name="Viewer")
    UserFactory(username="alice", roles=[admin, viewer])
    session.commit()

    grants = SQLAlchemyUserDirectory().current_roles_and_permissions("alice")

    assert grants == [
        RoleGrant(name="Admin", permissions=("DeleteUser", "ReadAll")),
        RoleGrant(name="Viewer", permissions=()),
    ]


def test_user_without_roles(session):
    UserFactory(username="bare")
    session.commit()

    assert SQLAlchemyUserDirectory().current_roles_and_permissions("bare") == []


def test_unknown_user_raises(session):
    with pytest.raises(NotFoundError) as exc_info:
        SQLAlchemyUserDirectory().current_roles_and_permissions("ghost")
    assert exc_info.value.key == "ghost"


def test_reflects_role_changes(session):
    """
    GIVEN a user whose role is changed after a first lookup
    WHEN the directory is queried again
    THEN the current grants are returned, not a cached copy.
    """
    user = UserFactory(username="mover", roles=[RoleFactory(name="Junior")])
    session.commit()
    directory = SQLAlchemyUserDirectory()
    assert [g.name for g in directory.current_roles_and_permissions("mover")] == ["Junior"]

    user.roles.append(RoleFactory(name="Senior"))
    session.commit()

    assert [g.name for g in directory.current_roles_and_permissions("mover")] == [
        "Junior",
        "Senior",
    ]
