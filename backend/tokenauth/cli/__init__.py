"""Flask CLI entry points (``flask tokens ...``)."""

from __future__ import annotations

from flask import Flask

from .tokens import tokens_cli


def init_app(app: Flask) -> None:
    """Attach the ``tokens`` group to ``app.cli``."""
    app.cli.add_command(tokens_cli)
