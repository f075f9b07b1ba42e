import logging
from typing import Optional

from fastapi import Depends, HTTPException
from starlette import status

from dms.lib.authentication import get_current_user
from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.types.authentication import UserData
from dms.models.enums.user_role import UserRole

logger = logging.getLogger(__name__)


async def require_current_user(user_data: Optional[UserData] = Depends(get_current_user)) -> UserData:
    """
    Dependency for routes that only authenticated users may call.
    """
    if user_data is None:
        logger.info(msg="Anonymous request to a route requiring authentication.", extra=logging_context())
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")

    return user_data


class RoleRequirer:
    """
    Dependency for routes that only users acting in one of *roles* may call.

    >>> provision_dependency = RoleRequirer([UserRole.admin])
    """

    def __init__(self, roles: list[UserRole]):
        self.roles = roles

    async def __call__(self, user_data: UserData = Depends(require_current_user)) -> UserData:
        save_to_logging_context({"required_roles": [role.name for role in self.roles]})

        if not user_data.acts_as_any(self.roles):
            logger.info(msg="Request to a role protected route without a required role.", extra=logging_context())
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not authorized to use this feature",
            )

        return user_data
