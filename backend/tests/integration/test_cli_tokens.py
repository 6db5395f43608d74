"""Integration tests for the ``flask tokens`` command group."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tests.factories.invalidated_token import InvalidatedTokenFactory
from tests.factories.user import RoleFactory, UserFactory
from tokenauth.core.token_auth import get_token_components
from tokenauth.services.tokens.dto import VerifyMode
from tokenauth.services.tokens.errors import TokenInvalidatedError


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def test_issue_prints_verifiable_token(app, runner, session):
    UserFactory(username="ops", roles=[RoleFactory(name="Operator")])
    session.commit()

    result = runner.invoke(args=["tokens", "issue", "ops"])

    assert result.exit_code == 0, result.output
    token = result.stdout.strip().splitlines()[0]
    verifier = get_token_components(app).verifier
    claims = verifier.verify(token, VerifyMode.ACCESS)
    assert claims.subject == "ops"
    assert verifier.extract_roles(token) == ["ROLE_Operator"]


def test_issue_unknown_user(runner):
    result = runner.invoke(args=["tokens", "issue", "nobody"])

    assert result.exit_code != 0
    assert "User not found: nobody" in result.output


def test_revoke_blocks_future_verification(app, runner, session):
    UserFactory(username="leaver")
    session.commit()
    token = runner.invoke(args=["tokens", "issue", "leaver"]).stdout.strip().splitlines()[0]
    jti = get_token_components(app).verifier.parse(token).id

    first = runner.invoke(args=["tokens", "revoke", token])
    second = runner.invoke(args=["tokens", "revoke", token])

    assert first.exit_code == 0
    assert f"revoked {jti}" in first.output
    assert f"{jti} was already revoked" in second.output
    with pytest.raises(TokenInvalidatedError):
        get_token_components(app).verifier.verify(token)


def test_revoke_rejects_garbage(runner):
    result = runner.invoke(args=["tokens", "revoke", "garbage"])

    assert result.exit_code != 0
    assert "malformed" in result.output


def test_purge_removes_records_past_retention(runner, session):
    now = datetime.now(UTC)
    InvalidatedTokenFactory(id="ancient", expiry_time=now - timedelta(days=3))
    InvalidatedTokenFactory(id="recent", expiry_time=now - timedelta(minutes=5))
    session.commit()

    result = runner.invoke(args=["tokens", "purge"])

    assert result.exit_code == 0, result.output
    assert "purged 1 record(s)" in result.output
