import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dms import deps
from dms.lib.authentication import get_current_user
from dms.lib.authorization import require_current_user
from dms.lib.logging import LoggedRoute
from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.lib.permissions import Action, assert_permission
from dms.lib.types.authentication import UserData
from dms.models.dms_file import DMSFile
from dms.routers.shared import (
    ACCESS_CONTROL_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ROUTER_BASE_PREFIX,
    VALIDATION_ERROR_RESPONSES,
)
from dms.view_models import dms_file, dms_permission

TAG_NAME = "Documents"

router = APIRouter(
    prefix=f"{ROUTER_BASE_PREFIX}/dms-files",
    tags=[TAG_NAME],
    responses={**PUBLIC_ERROR_RESPONSES},
    route_class=LoggedRoute,
)

metadata = {
    "name": TAG_NAME,
    "description": "Register documents and directories and inspect how they are shared.",
}

logger = logging.getLogger(__name__)


def fetch_dms_file_or_404(db: Session, item_id: int) -> DMSFile:
    item = db.query(DMSFile).filter(DMSFile.id == item_id).one_or_none()
    if not item:
        save_to_logging_context({"dms_file": item_id})
        logger.debug(msg="The requested document does not exist.", extra=logging_context())
        raise HTTPException(status_code=404, detail=f"Document with ID {item_id} not found")

    return item


@router.post(
    "/",
    status_code=200,
    response_model=dms_file.DMSFile,
    responses={**ACCESS_CONTROL_ERROR_RESPONSES, **VALIDATION_ERROR_RESPONSES},
    summary="Create a document",
)
def create_dms_file(
    *,
    item_create: dms_file.DMSFileCreate,
    db: Session = Depends(deps.get_db),
    user_data: UserData = Depends(require_current_user),
) -> Any:
    """
    Create a document or directory, optionally inside a directory the current user may write to.
    """
    parent: Optional[DMSFile] = None
    if item_create.parent_id is not None:
        parent = fetch_dms_file_or_404(db, item_create.parent_id)
        if not parent.is_directory:
            logger.info(msg="Refused to create a document inside a non-directory.", extra=logging_context())
            raise HTTPException(status_code=400, detail=f"Document with ID {parent.id} is not a directory")

        assert_permission(user_data, parent, Action.WRITE)

    item = DMSFile(
        file_name=item_create.file_name,
        is_directory=item_create.is_directory,
        parent=parent,
        created_by=user_data.user,
        modified_by=user_data.user,
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    save_to_logging_context({"created_resource": item.id})
    return item


@router.get("/{item_id}", status_code=200, response_model=dms_file.DMSFile, summary="Fetch document by ID")
def fetch_dms_file(
    *,
    item_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
) -> Any:
    """
    Fetch a single document by ID.
    """
    item = fetch_dms_file_or_404(db, item_id)
    assert_permission(user_data, item, Action.READ)
    return item


@router.get(
    "/{item_id}/permissions",
    status_code=200,
    response_model=List[dms_permission.DMSPermission],
    summary="List the sharing records of a document",
)
def list_dms_file_permissions(
    *,
    item_id: int,
    db: Session = Depends(deps.get_db),
    user_data: Optional[UserData] = Depends(get_current_user),
) -> Any:
    """
    List how a document is shared.
    """
    item = fetch_dms_file_or_404(db, item_id)
    assert_permission(user_data, item, Action.READ)
    return sorted(item.permissions, key=lambda record: record.id)
