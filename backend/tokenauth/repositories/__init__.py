"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from tokenauth.repositories.base import BaseRepository
from tokenauth.repositories.invalidated_token import InvalidatedTokenRepository
from tokenauth.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "InvalidatedTokenRepository",
    "UserRepository",
]
