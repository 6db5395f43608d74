"""Application factory."""

from __future__ import annotations

from flask import Flask

from tokenauth.core.config import BaseConfig, get_config
from tokenauth.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build the Flask application.

    Wiring order matters: the database and Redis client must exist before the
    token components pick a revocation store, and the components must exist
    before any blueprint or CLI command resolves them.

    :param config: Config class, import string or object; ``APP_ENV`` decides
        when omitted.
    :param instance_relative_config: Also read ``instance/<filename>`` when present.
    :param instance_config_filename: Name of the optional instance config file.
    :raises tokenauth.core.config.ConfigurationError: If the token secret,
        lifetimes or store backend are missing or invalid. No app is returned
        in that case.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from tokenauth import cli
    from tokenauth.api import init_app as init_api
    from tokenauth.core import errors, extensions, token_auth

    extensions.init_app(app)
    init_logging(app)
    token_auth.init_app(app)
    init_api(app)
    errors.init_app(app)
    cli.init_app(app)

    return app
