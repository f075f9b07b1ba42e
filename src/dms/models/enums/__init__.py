"""
Enums used by DMS models.
"""

from .permission_value import PermissionValue
from .user_role import UserRole

__all__ = [
    "PermissionValue",
    "UserRole",
]
