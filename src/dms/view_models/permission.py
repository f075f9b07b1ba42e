from typing import Optional

from pydantic import ConfigDict

from dms.view_models import record_type_validator, set_record_type
from dms.view_models.base.base import BaseModel


class PermissionBase(BaseModel):
    """Base class for permission view models."""

    name: str
    object: str
    condition: Optional[str] = None
    condition_params: Optional[str] = None
    can_create: bool
    can_read: bool
    can_write: bool
    can_remove: bool


class SavedPermission(PermissionBase):
    """Base class for permission view models representing saved records."""

    record_type: str = None  # type: ignore
    id: int

    set_record_type = record_type_validator()(set_record_type)

    model_config = ConfigDict(from_attributes=True)


class Permission(SavedPermission):
    """Permission view model containing properties visible to all users."""

    pass


class ShortPermission(BaseModel):
    """Permission view model containing a smaller set of properties to return in list contexts."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
