"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

STORE_BACKENDS: Final[frozenset[str]] = frozenset({"sqlalchemy", "redis", "memory"})


# Loads .env in development (no-op when the file is missing)
load_dotenv()


class ConfigurationError(RuntimeError):
    """
    Raised when required token settings are missing or invalid.

    This is a startup failure: :func:`tokenauth.factory.create_app` lets it
    propagate so the process never serves requests with a broken key or TTL.
    """


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Immutable token configuration shared by the issuer and the verifier.

    :param signing_secret: Symmetric HS256 key.
    :type signing_secret: str | bytes
    :param access_ttl: Lifetime of the access window (whole seconds).
    :type access_ttl: timedelta
    :param refresh_ttl: Lifetime of the refresh window, measured from ``iat``.
    :type refresh_ttl: timedelta
    :raises ConfigurationError: If the secret is empty or blank, or a TTL is
        non-positive or not a whole number of seconds.
    """

    signing_secret: str | bytes
    access_ttl: timedelta
    refresh_ttl: timedelta

    def __post_init__(self) -> None:
        if not self.signing_secret or not self.signing_secret.strip():
            raise ConfigurationError("JWT_SECRET_KEY must be a non-empty secret.")
        for name, ttl in (("access_ttl", self.access_ttl), ("refresh_ttl", self.refresh_ttl)):
            if not isinstance(ttl, timedelta) or ttl <= timedelta(0):
                raise ConfigurationError(f"{name} must be a positive duration.")
            # NumericDate claims carry whole seconds only
            if ttl.microseconds:
                raise ConfigurationError(f"{name} must be a whole number of seconds.")


def _require_seconds(config: Mapping[str, Any], key: str) -> timedelta:
    """Read a required positive integer number of seconds from ``config``."""
    raw = config.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ConfigurationError(f"{key} is required.")
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be an integer number of seconds.")
    try:
        seconds = int(str(raw).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer number of seconds.") from exc
    if seconds <= 0:
        raise ConfigurationError(f"{key} must be positive, got {seconds}.")
    return timedelta(seconds=seconds)


def load_token_settings(config: Mapping[str, Any]) -> TokenSettings:
    """Build :class:`TokenSettings` from a Flask config (or any mapping).

    Parameters
    ----------
    config: Mapping[str, Any]
        Source of ``JWT_SECRET_KEY``, ``JWT_ACCESS_TTL_SECONDS`` and
        ``JWT_REFRESH_TTL_SECONDS``.

    Returns
    -------
    TokenSettings
        Validated, immutable settings.

    Raises
    ------
    ConfigurationError
        If any of the three keys is missing or invalid.
    """
    secret = config.get("JWT_SECRET_KEY")
    if isinstance(secret, str):
        secret = secret.strip()
    if not secret:
        raise ConfigurationError("JWT_SECRET_KEY is required.")
    return TokenSettings(
        signing_secret=secret,
        access_ttl=_require_seconds(config, "JWT_ACCESS_TTL_SECONDS"),
        refresh_ttl=_require_seconds(config, "JWT_REFRESH_TTL_SECONDS"),
    )


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    JWT_SECRET_KEY: str | None
        HS256 signing key. Required; there is deliberately no fallback value.
    JWT_ACCESS_TTL_SECONDS: str | None
        Access window in seconds. Required.
    JWT_REFRESH_TTL_SECONDS: str | None
        Refresh window in seconds, measured from token issuance. Required.
    TOKEN_STORE_BACKEND: str
        Revocation store implementation: ``sqlalchemy``, ``redis`` or ``memory``.
    REDIS_URL: str | None
        Connection URL used when ``TOKEN_STORE_BACKEND`` is ``redis``.
    REDIS_SOCKET_TIMEOUT: float
        Seconds before a Redis command gives up; a timeout fails the request.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    SQLALCHEMY_TRACK_MODIFICATIONS: bool
        Disabled to avoid extra overhead from the event system.
    SQLALCHEMY_ECHO: bool
        When ``True`` SQLAlchemy logs SQL statements for debugging.
    PROPAGATE_EXCEPTIONS: bool
        Controls Flask error propagation.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    DEBUG: bool
        Toggles Flask debug mode.
    TESTING: bool
        Enables Flask testing mode when ``True``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Token signing / lifetimes
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_TTL_SECONDS = os.getenv("JWT_ACCESS_TTL_SECONDS")
    JWT_REFRESH_TTL_SECONDS = os.getenv("JWT_REFRESH_TTL_SECONDS")

    # Revocation store
    TOKEN_STORE_BACKEND = os.getenv("TOKEN_STORE_BACKEND", "sqlalchemy").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask
    PROPAGATE_EXCEPTIONS = False

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships fixed token settings so the suite never depends on the shell env.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True

    JWT_SECRET_KEY = "testing-secret-key-with-at-least-32-bytes"
    JWT_ACCESS_TTL_SECONDS = "900"
    JWT_REFRESH_TTL_SECONDS = "86400"
    TOKEN_STORE_BACKEND = "sqlalchemy"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
