from tokenauth.models.invalidated_token import InvalidatedToken
from tokenauth.models.user import Permission, Role, RolePermission, User, UserRole

__all__ = [
    "InvalidatedToken",
    "Permission",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
]
