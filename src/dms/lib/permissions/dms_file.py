from typing import Optional

from dms.lib.logging.context import save_to_logging_context
from dms.lib.permissions.actions import Action
from dms.lib.permissions.grants import permitted_actions
from dms.lib.permissions.models import PermissionResponse
from dms.lib.permissions.utils import deny_action_for_entity, roles_permitted
from dms.lib.types.authentication import UserData
from dms.models.dms_file import DMSFile
from dms.models.enums.user_role import UserRole
from dms.models.user import User


def shared_actions(user: User, entity: DMSFile) -> set[str]:
    """
    Actions the sharing records of *entity* grant to *user*, directly or through the user's group.
    """
    actions: set[str] = set()
    for record in entity.permissions:
        shared_with_user = record.user_id is not None and record.user_id == user.id
        shared_with_group = record.group_id is not None and record.group_id == user.group_id
        if not (shared_with_user or shared_with_group):
            continue

        # The tier permission resolved when the record was saved, not its current value.
        if record.permission is not None:
            actions |= permitted_actions(record.permission)

    return actions


def has_permission(user_data: Optional[UserData], entity: DMSFile, action: Action) -> PermissionResponse:
    """
    Check if a user has permission to perform an action on a document.

    Admins and the creator of a document may perform any action. Other users are granted the actions of the tier
    permissions resolved on the document's sharing records for them or their group. A document is also readable by users who can read its
    parent directory through a sharing record.

    Args:
        user_data: The user's authentication data and roles. None for anonymous users.
        entity: The document to check permissions for.
        action: The action to be performed.

    Returns:
        PermissionResponse: Contains permission result, HTTP status code, and message.
    """
    user_is_owner = False
    granted: set[str] = set()
    active_roles: list[UserRole] = []

    if user_data is not None:
        user_is_owner = entity.created_by_id is not None and entity.created_by_id == user_data.user.id
        granted = shared_actions(user_data.user, entity)
        if entity.parent is not None and "read" in shared_actions(user_data.user, entity.parent):
            granted.add("read")
        active_roles = user_data.active_roles

    save_to_logging_context(
        {
            "dms_file": entity.id,
            "user_is_owner": user_is_owner,
            "shared_actions": sorted(granted),
        }
    )

    if user_is_owner or roles_permitted(active_roles, [UserRole.admin]):
        return PermissionResponse(True)
    if action.value in granted:
        return PermissionResponse(True)

    return deny_action_for_entity("document", entity.id, user_data, "read" in granted)
