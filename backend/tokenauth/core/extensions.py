"""Process-wide extension singletons: database, migrations and Redis."""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

log = logging.getLogger(__name__)

# Constraint names the migrations refer to (pk_users, fk_user_roles_role_id_roles, ...)
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
)
migrate = Migrate(render_as_batch=True)
redis_client: redis.Redis | None = None


def _connect_redis(url: str, socket_timeout: float) -> redis.Redis:
    """Open a client and ping it so a bad URL fails at startup, not on first refresh."""
    client = redis.Redis.from_url(url, socket_timeout=socket_timeout)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the database and migrations; connect Redis when ``REDIS_URL`` is set.

    The models package is imported here so the metadata is complete before
    Alembic or ``create_all`` look at it.

    :raises RuntimeError: If ``REDIS_URL`` is set but the server does not answer.
    """
    global redis_client

    db.init_app(app)
    from tokenauth import models as _models  # noqa: F401

    migrate.init_app(app, db)

    url = app.config.get("REDIS_URL")
    if not url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return

    redis_client = _connect_redis(url, float(app.config.get("REDIS_SOCKET_TIMEOUT", 2.0)))
    app.extensions["redis_client"] = redis_client
    log.info("redis.connected")


def get_redis() -> redis.Redis:
    """Return the connected Redis client.

    :raises RuntimeError: When ``REDIS_URL`` was not configured.
    """
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Set REDIS_URL and call init_app().")
    return redis_client
