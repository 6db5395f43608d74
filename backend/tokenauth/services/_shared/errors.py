"""
Service-layer exceptions.

They never depend on Flask; :meth:`BaseService.translate_exceptions` maps
them to the API error types at the HTTP boundary.
"""

from __future__ import annotations

from dataclasses import dataclass


class ServiceError(Exception):
    """Root of every error the token core and its adapters raise on purpose."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    A looked-up entity does not exist.

    :param entity: Entity name, e.g. ``"User"``.
    :param key: The key that was searched for.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"
