import logging
from typing import Optional

from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.permissions.models import PermissionResponse
from dms.lib.types.authentication import UserData
from dms.models.enums.user_role import UserRole

logger = logging.getLogger(__name__)


def roles_permitted(user_roles: list[UserRole], permitted_roles: list[UserRole]) -> bool:
    save_to_logging_context({"permitted_roles": [role.name for role in permitted_roles]})

    if not user_roles:
        logger.debug(msg="User has no associated roles.", extra=logging_context())
        return False

    return any(role in permitted_roles for role in user_roles)


def deny_action_for_entity(
    entity_name: str,
    entity_id: Optional[int],
    user_data: Optional[UserData],
    user_may_view: bool,
) -> PermissionResponse:
    """
    Build the response for a denied action.

    Anonymous users are asked to authenticate. Users who may not even view the entity are told it does not exist,
    so that its existence is not disclosed. Everyone else is refused outright.
    """
    if user_data is None:
        return PermissionResponse(False, 401, f"insufficient permissions on {entity_name} with ID '{entity_id}'")
    if not user_may_view:
        return PermissionResponse(False, 404, f"{entity_name} with ID '{entity_id}' not found")

    return PermissionResponse(False, 403, f"insufficient permissions on {entity_name} with ID '{entity_id}'")
