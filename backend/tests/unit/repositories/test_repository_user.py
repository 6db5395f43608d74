"""Tests for UserRepository."""

from __future__ import annotations

from sqlalchemy import inspect

from tests.factories.user import PermissionFactory, RoleFactory, UserFactory
from tokenauth.repositories import UserRepository


def test_get_by_username_returns_user(session):
    user = UserFactory(username="carol")
    session.commit()

    assert UserRepository(session=session).get_by_username("carol") is user


def test_get_by_username_strips_input(session):
    UserFactory(username="dave")
    session.commit()

    assert UserRepository(session=session).get_by_username(" dave ").username == "dave"


def test_get_by_username_missing(session):
    assert UserRepository(session=session).get_by_username("nobody") is None


def test_get_by_username_eager_loads_grants(session):
    role = RoleFactory(name="Auditor", permissions=[PermissionFactory(name="ReadLogs")])
    UserFactory(username="erin", roles=[role])
    session.commit()
    session.expunge_all()

    user = UserRepository(session=session).get_by_username("erin")

    state = inspect(user)
    assert "user_roles" not in state.unloaded
    link = user.user_roles[0]
    assert "role_permissions" not in inspect(link.role).unloaded
    assert link.role.role_permissions[0].permission.name == "ReadLogs"
