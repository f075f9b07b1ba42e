from typing import Any, Callable, Optional, Union

from dms.lib.logging.context import save_to_logging_context
from dms.lib.permissions.actions import Action
from dms.lib.permissions.exceptions import PermissionException
from dms.lib.permissions.models import PermissionResponse
from dms.lib.types.authentication import UserData
from dms.models.dms_file import DMSFile
from dms.models.dms_permission import DMSPermission

from . import dms_file, dms_permission

EntityType = Union[DMSFile, DMSPermission]


def has_permission(user_data: Optional[UserData], entity: EntityType, action: Action) -> PermissionResponse:
    """
    Dispatch a permission check to the handler for the entity's type.

    Raises:
        NotImplementedError: If the entity type is not supported.
    """
    entity_handlers: dict[type, Callable[[Optional[UserData], Any, Action], PermissionResponse]] = {
        DMSFile: dms_file.has_permission,
        DMSPermission: dms_permission.has_permission,
    }

    entity_type = type(entity)

    if entity_type not in entity_handlers:
        supported_types = ", ".join(cls.__name__ for cls in entity_handlers.keys())
        raise NotImplementedError(
            f"Permission checks are not implemented for entity type '{entity_type.__name__}'. "
            f"Supported entity types: {supported_types}"
        )

    handler = entity_handlers[entity_type]
    return handler(user_data, entity, action)


def assert_permission(user_data: Optional[UserData], entity: EntityType, action: Action) -> PermissionResponse:
    """
    Assert that a user has permission to perform an action on an entity.

    Raises:
        PermissionException: If the user lacks sufficient permissions.
    """
    save_to_logging_context({"permission_boundary": action.name})
    permission = has_permission(user_data, entity, action)

    if not permission.permitted:
        http_code = permission.http_code if permission.http_code is not None else 403
        message = permission.message if permission.message is not None else "Permission denied"
        raise PermissionException(http_code=http_code, message=message)

    return permission
