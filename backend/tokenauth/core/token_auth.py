"""Build the token components once per app and expose them to handlers."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app

from tokenauth.core.config import (
    STORE_BACKENDS,
    ConfigurationError,
    TokenSettings,
    load_token_settings,
)
from tokenauth.services._shared.ports import (
    InMemoryInvalidatedTokenStore,
    InvalidatedTokenStore,
    UserDirectory,
)
from tokenauth.services.tokens.issuer import TokenIssuer
from tokenauth.services.tokens.refresher import TokenRefresher
from tokenauth.services.tokens.verifier import TokenVerifier

EXTENSION_KEY = "token_auth"


@dataclass(frozen=True, slots=True)
class TokenComponents:
    """Immutable bundle shared by every request of one application."""

    settings: TokenSettings
    store: InvalidatedTokenStore
    directory: UserDirectory
    issuer: TokenIssuer
    verifier: TokenVerifier
    refresher: TokenRefresher
    backend: str


def build_store(app: Flask, settings: TokenSettings) -> tuple[str, InvalidatedTokenStore]:
    """Instantiate the revocation store selected by ``TOKEN_STORE_BACKEND``.

    :raises ConfigurationError: Unknown backend, or ``redis`` without a client.
    """
    backend = str(app.config.get("TOKEN_STORE_BACKEND") or "sqlalchemy").strip().lower()
    if backend not in STORE_BACKENDS:
        raise ConfigurationError(
            f"TOKEN_STORE_BACKEND must be one of {sorted(STORE_BACKENDS)}, got {backend!r}."
        )

    if backend == "redis":
        from tokenauth.core.extensions import get_redis
        from tokenauth.infra.redis.redis_invalidated_token_store import (
            RedisInvalidatedTokenStore,
        )

        try:
            client = get_redis()
        except RuntimeError as exc:
            raise ConfigurationError("TOKEN_STORE_BACKEND=redis requires REDIS_URL.") from exc
        return backend, RedisInvalidatedTokenStore(client, retention=settings.refresh_ttl)

    if backend == "memory":
        return backend, InMemoryInvalidatedTokenStore()

    from tokenauth.infra.sqlalchemy.invalidated_token_store import (
        SQLAlchemyInvalidatedTokenStore,
    )

    return backend, SQLAlchemyInvalidatedTokenStore(retention=settings.refresh_ttl)


def init_app(app: Flask) -> TokenComponents:
    """
    Validate token settings and wire issuer, verifier and refresher.

    Call after :func:`tokenauth.core.extensions.init_app` so the Redis client
    exists when that backend is selected.

    :raises ConfigurationError: Missing/invalid secret or TTLs, bad backend.
    """
    from tokenauth.infra.sqlalchemy.user_directory import SQLAlchemyUserDirectory

    settings = load_token_settings(app.config)
    backend, store = build_store(app, settings)
    directory = SQLAlchemyUserDirectory()
    issuer = TokenIssuer(settings)
    verifier = TokenVerifier(settings, store)
    refresher = TokenRefresher(
        verifier=verifier, issuer=issuer, store=store, directory=directory
    )
    components = TokenComponents(
        settings=settings,
        store=store,
        directory=directory,
        issuer=issuer,
        verifier=verifier,
        refresher=refresher,
        backend=backend,
    )
    app.extensions[EXTENSION_KEY] = components
    app.logger.info("token_auth.ready", extra={"mode": backend})
    return components


def get_token_components(app: Flask | None = None) -> TokenComponents:
    """Return the components registered on ``app`` (default: current app)."""
    target = app or current_app
    try:
        return target.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("Token components are not initialized. Call init_app().") from None
