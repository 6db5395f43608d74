"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResponseSchema, RefreshRequestSchema, WhoAmISchema

__all__ = [
    "AuthResponseSchema",
    "RefreshRequestSchema",
    "WhoAmISchema",
]
