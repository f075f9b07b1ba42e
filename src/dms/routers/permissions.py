import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dms import deps
from dms.lib.authorization import RoleRequirer, require_current_user
from dms.lib.dms_permissions import create_permissions
from dms.lib.logging import LoggedRoute
from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.permissions.grants import held_permissions
from dms.lib.types.authentication import UserData
from dms.models.enums.user_role import UserRole
from dms.models.permission import Permission
from dms.routers.shared import ACCESS_CONTROL_ERROR_RESPONSES, PUBLIC_ERROR_RESPONSES, ROUTER_BASE_PREFIX
from dms.view_models import permission

TAG_NAME = "Permissions"

router = APIRouter(
    prefix=f"{ROUTER_BASE_PREFIX}/permissions",
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Provision and inspect the named permissions that grant access to documents.",
}

logger = logging.getLogger(__name__)


@router.post(
    "/dms/provision",
    status_code=200,
    response_model=List[permission.Permission],
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Provision the document management permissions",
)
def provision_dms_permissions(
    *,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(RoleRequirer([UserRole.admin])),
) -> Any:
    """
    Create any missing document management permission and reset every one of them to its policy.
    """
    provisioned = create_permissions(db)
    db.commit()

    items = list(provisioned.values())
    for item in items:
        db.refresh(item)

    save_to_logging_context({"provisioned_by": user_data.user.id})
    logger.info(msg="Provisioned document management permissions on request.", extra=logging_context())
    return items


@router.get(
    "/users/me",
    status_code=200,
    response_model=List[permission.Permission],
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="List my permissions",
)
def list_my_permissions(
    *,
    user_data: UserData = Depends(require_current_user),
) -> Any:
    """
    List the permissions held by the current user, directly or through their group.
    """
    return sorted(held_permissions(user_data.user), key=lambda p: p.name)


@router.get("/{name}", status_code=200, response_model=permission.Permission, summary="Fetch permission by name")
def fetch_permission(
    *,
    name: str,
    db: Session = Depends(deps.get_db),
) -> Any:
    """
    Fetch a single permission by name.
    """
    item = db.query(Permission).filter(Permission.name == name).one_or_none()
    if not item:
        logger.debug(msg="The requested permission does not exist.", extra=logging_context())
        raise HTTPException(status_code=404, detail=f"Permission with name {name} not found")

    return item
