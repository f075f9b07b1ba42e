import logging

from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.permissions.actions import Action
from dms.models.permission import Permission
from dms.models.user import User

logger = logging.getLogger(__name__)

ACTION_FLAGS = {
    Action.CREATE: "can_create",
    Action.READ: "can_read",
    Action.WRITE: "can_write",
    Action.REMOVE: "can_remove",
}


def held_permissions(user: User) -> list[Permission]:
    """
    Permissions attached to *user* directly or through the user's group, without duplicates.
    """
    held: list[Permission] = list(user.permissions)
    if user.group is not None:
        held.extend(p for p in user.group.permissions if p not in held)

    return held


def permitted_actions(permission: Permission) -> set[str]:
    """
    Names of the actions whose grant flag is set on *permission*.
    """
    return {action.value for action, flag in ACTION_FLAGS.items() if getattr(permission, flag)}


def object_matches(permission_object: str, object_name: str) -> bool:
    """
    Whether a permission object applies to *object_name*. A trailing ``.*`` matches every model in that package.

    >>> object_matches("dms.models.*", "dms.models.dms_file.DMSFile")
    True
    >>> object_matches("dms.models.meta_file.MetaFile", "dms.models.dms_file.DMSFile")
    False
    """
    if permission_object == object_name:
        return True
    if permission_object.endswith(".*"):
        return object_name.startswith(permission_object[:-1])

    return False


def collect_permissions(user: User, object_name: str, action: Action) -> list[Permission]:
    """
    Find the permissions held by *user* that grant *action* on *object_name*.

    The conditions of the returned permissions are not evaluated. Rows of *object_name* are accessible through any
    returned permission whose condition they satisfy, or through any returned permission without a condition.
    """
    flag = ACTION_FLAGS[action]
    granting = [
        permission
        for permission in held_permissions(user)
        if getattr(permission, flag) and object_matches(permission.object, object_name)
    ]

    save_to_logging_context({"object": object_name, "granting_permissions": [p.name for p in granting]})
    logger.debug(msg="Collected permissions granting an action on an object.", extra=logging_context())
    return granting
