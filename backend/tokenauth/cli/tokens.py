"""Flask CLI commands for operating on tokens."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from tokenauth.core.token_auth import get_token_components
from tokenauth.infra.sqlalchemy.invalidated_token_store import SQLAlchemyInvalidatedTokenStore
from tokenauth.services._shared.errors import NotFoundError
from tokenauth.services._shared.ports import InsertResult
from tokenauth.services.tokens.errors import TokenError

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Issue, revoke and clean up tokens."""


@tokens_cli.command("issue")
@click.argument("username")
@with_appcontext
def issue_command(username: str) -> None:
    """Print a fresh token for USERNAME with its current roles."""
    components = get_token_components()
    try:
        roles = components.directory.current_roles_and_permissions(username)
    except NotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    token = components.issuer.issue(username, roles)
    expires = components.verifier.extract_expiration(token)
    click.echo(token)
    click.echo(f"expires: {expires.isoformat()}", err=True)


@tokens_cli.command("revoke")
@click.argument("token")
@with_appcontext
def revoke_command(token: str) -> None:
    """Record the id of TOKEN so it never verifies again."""
    components = get_token_components()
    try:
        claims = components.verifier.parse(token)
    except TokenError as exc:
        raise click.ClickException(f"Cannot revoke: {exc} ({exc.kind.value})") from exc
    result = components.store.insert(claims.id, claims.expiration)
    LOGGER.info("token.revoked", extra={"jti": claims.id, "subject": claims.subject})
    if result == InsertResult.ALREADY_EXISTS:
        click.echo(f"{claims.id} was already revoked")
    else:
        click.echo(f"revoked {claims.id}")


@tokens_cli.command("purge")
@with_appcontext
def purge_command() -> None:
    """Delete revocation records that can no longer match a live token."""
    components = get_token_components()
    store = components.store
    if not isinstance(store, SQLAlchemyInvalidatedTokenStore):
        raise click.UsageError(
            f"purge only applies to the sqlalchemy backend (current: {components.backend})."
        )
    deleted = store.purge_expired(components.verifier.now())
    click.echo(f"purged {deleted} record(s)")
