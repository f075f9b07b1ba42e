import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dms import deps
from dms.lib.authentication import get_current_user
from dms.lib.authorization import require_current_user
from dms.lib.dms_permissions import remove_dms_permission, save_dms_permission
from dms.lib.logging import LoggedRoute
from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.permissions import Action, assert_permission
from dms.lib.types.authentication import UserData
from dms.models.dms_permission import DMSPermission
from dms.models.group import Group
from dms.models.user import User
from dms.routers.dms_files import fetch_dms_file_or_404
from dms.routers.shared import (
    ACCESS_CONTROL_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    VALIDATION_ERROR_RESPONSES,
)
from dms.view_models import dms_permission

TAG_NAME = "Sharing"

router = APIRouter(
    prefix=f"{ROUTER_BASE_PREFIX}/dms-permissions",
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Share documents with users and groups.",
}

logger = logging.getLogger(__name__)


def fetch_dms_permission_or_404(db: Session, item_id: int) -> DMSPermission:
    item = db.query(DMSPermission).filter(DMSPermission.id == item_id).one_or_none()
    if not item:
        save_to_logging_context({"sharing_record": item_id})
        logger.debug(msg="The requested sharing record does not exist.", extra=logging_context())
        raise HTTPException(status_code=404, detail=f"Sharing record with ID {item_id} not found")

    return item


def _fetch_holders(
    db: Session, item: dms_permission.DMSPermissionModify
) -> tuple[Optional[User], Optional[Group]]:
    user = None
    if item.user_id is not None:
        user = db.query(User).filter(User.id == item.user_id).one_or_none()
        if user is None:
            raise HTTPException(status_code=404, detail=f"User with ID {item.user_id} not found")

    group = None
    if item.group_id is not None:
        group = db.query(Group).filter(Group.id == item.group_id).one_or_none()
        if group is None:
            raise HTTPException(status_code=404, detail=f"Group with ID {item.group_id} not found")

    return user, group


@router.post(
    "/",
    status_code=200,
    response_model=dms_permission.DMSPermission,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Share a document",
)
def create_dms_permission(
    *,
    item_create: dms_permission.DMSPermissionCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Any:
    """
    Share a document with a user and/or a group at the given access tier.
    """
    logger.debug(msg="Began creation of new sharing record.", extra=logging_context())

    file = fetch_dms_file_or_404(db, item_create.file_id)
    # Sharing a document requires full access to it.
    assert_permission(user_data, file, Action.CREATE)
    user, group = _fetch_holders(db, item_create)

    item = DMSPermission(
        file=file,
        user=user,
        group=group,
        value=item_create.value,
        created_by=user_data.user,
    )
    save_dms_permission(db, item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"created_resource": item.id})
    return item


@router.get(
    "/{item_id}",
    status_code=200,
    response_model=dms_permission.DMSPermission,
    summary="Fetch sharing record by ID",
)
def fetch_dms_permission(
    *,
    item_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
) -> Any:
    """
    Fetch a single sharing record by ID.
    """
    item = fetch_dms_permission_or_404(db, item_id)
    assert_permission(user_data, item, Action.READ)
    return item


@router.put(
    "/{item_id}",
    status_code=200,
    response_model=dms_permission.DMSPermission,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Update a sharing record",
)
def update_dms_permission(
    *,
    item_id: int,
    item_update: dms_permission.DMSPermissionUpdate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Any:
    """
    Change who a document is shared with, or at which access tier.
    """
    item = fetch_dms_permission_or_404(db, item_id)
    assert_permission(user_data, item, Action.WRITE)
    user, group = _fetch_holders(db, item_update)

    item.user = user
    item.user_id = user.id if user is not None else None
    item.group = group
    item.group_id = group.id if group is not None else None
    item.value = item_update.value

    save_dms_permission(db, item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"updated_resource": item.id})
    return item


@router.delete(
    "/{item_id}",
    status_code=200,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES},
    summary="Delete a sharing record",
)
def delete_dms_permission(
    *,
    item_id: int,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> None:
    """
    Stop sharing a document through this record.
    """
    item = fetch_dms_permission_or_404(db, item_id)
    assert_permission(user_data, item, Action.REMOVE)

    remove_dms_permission(db, item)
    db.commit()

    save_to_logging_context({"deleted_resource": item_id})
