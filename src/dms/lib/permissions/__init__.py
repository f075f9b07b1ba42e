"""
Access control for documents and document sharing records.

Usage:
    >>> from dms.lib.permissions import Action, has_permission, assert_permission
    >>>
    >>> result = has_permission(user_data, dms_file, Action.READ)
    >>> if result.permitted:
    ...     pass
    >>>
    >>> # Raises PermissionException if denied
    >>> assert_permission(user_data, dms_file, Action.WRITE)
"""

from .actions import Action
from .core import assert_permission, has_permission
from .exceptions import PermissionException
from .grants import collect_permissions

__all__ = ["has_permission", "assert_permission", "collect_permissions", "Action", "PermissionException"]
