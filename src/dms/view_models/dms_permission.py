from datetime import date
from typing import Optional

from pydantic import ConfigDict

from dms.models.enums.permission_value import PermissionValue
from dms.view_models import record_type_validator, set_record_type
from dms.view_models.base.base import BaseModel
from dms.view_models.permission import ShortPermission
from dms.view_models.user import ShortGroup, ShortUser


class DMSPermissionModify(BaseModel):
    """Base class for view models that create or update document sharing records."""

    user_id: Optional[int] = None
    group_id: Optional[int] = None
    value: Optional[PermissionValue] = None


class DMSPermissionCreate(DMSPermissionModify):
    """View model for sharing a document."""

    file_id: int


class DMSPermissionUpdate(DMSPermissionModify):
    """View model for updating a document sharing record."""

    pass


class SavedDMSPermission(BaseModel):
    """Base class for document sharing record view models representing saved records."""

    record_type: str = None  # type: ignore
    id: int
    file_id: int
    value: Optional[str] = None
    creation_date: date

    set_record_type = record_type_validator()(set_record_type)

    model_config = ConfigDict(from_attributes=True)


class DMSPermission(SavedDMSPermission):
    """Document sharing record view model containing properties visible to users who may read it."""

    user: Optional[ShortUser] = None
    group: Optional[ShortGroup] = None
    permission: Optional[ShortPermission] = None
    created_by: Optional[ShortUser] = None
