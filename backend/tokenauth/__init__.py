"""Token issuing, verification and rotation service.

``flask --app tokenauth`` picks up :func:`create_app`.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
