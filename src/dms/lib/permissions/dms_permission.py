from typing import Optional

from dms.lib.logging.context import save_to_logging_context
from dms.lib.permissions import dms_file
from dms.lib.permissions.actions import Action
from dms.lib.permissions.models import PermissionResponse
from dms.lib.permissions.utils import deny_action_for_entity, roles_permitted
from dms.lib.types.authentication import UserData
from dms.models.dms_permission import DMSPermission
from dms.models.enums.permission_value import PermissionValue
from dms.models.enums.user_role import UserRole


def holds_full_share(user_data: UserData, entity: DMSPermission) -> bool:
    """
    Whether *entity* shares its document at the full tier with the user or the user's group.
    """
    if PermissionValue.parse(entity.value) is not PermissionValue.full:
        return False

    user = user_data.user
    shared_with_user = entity.user_id is not None and entity.user_id == user.id
    shared_with_group = entity.group_id is not None and entity.group_id == user.group_id
    return shared_with_user or shared_with_group


def has_permission(user_data: Optional[UserData], entity: DMSPermission, action: Action) -> PermissionResponse:
    """
    Check if a user has permission to perform an action on a document sharing record.

    Admins, the creator of a sharing record and the user or group it shares the document with at the full tier may
    manage it. Full access to the document alone does not extend to sharing records created by someone else. Anyone
    who may read the document may read its sharing records.
    """
    user_is_creator = False
    user_holds_full_share = False
    active_roles = []

    if user_data is not None:
        user_is_creator = entity.created_by_id is not None and entity.created_by_id == user_data.user.id
        user_holds_full_share = holds_full_share(user_data, entity)
        active_roles = user_data.active_roles

    save_to_logging_context(
        {
            "sharing_record": entity.id,
            "user_is_creator": user_is_creator,
            "user_holds_full_share": user_holds_full_share,
        }
    )

    if user_is_creator or user_holds_full_share or roles_permitted(active_roles, [UserRole.admin]):
        return PermissionResponse(True)

    user_may_view = dms_file.has_permission(user_data, entity.file, Action.READ).permitted
    if action == Action.READ and user_may_view:
        return PermissionResponse(True)

    return deny_action_for_entity("sharing record", entity.id, user_data, user_may_view)
