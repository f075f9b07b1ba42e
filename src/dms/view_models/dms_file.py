from datetime import date
from typing import Optional

from pydantic import ConfigDict

from dms.view_models import record_type_validator, set_record_type
from dms.view_models.base.base import BaseModel
from dms.view_models.user import ShortUser


class DMSFileBase(BaseModel):
    """Base class for document view models."""

    file_name: str
    is_directory: bool = False
    parent_id: Optional[int] = None


class DMSFileCreate(DMSFileBase):
    """View model for creating a new document or directory."""

    pass


class SavedDMSFile(DMSFileBase):
    """Base class for document view models representing saved records."""

    record_type: str = None  # type: ignore
    id: int
    creation_date: date
    modification_date: date

    set_record_type = record_type_validator()(set_record_type)

    model_config = ConfigDict(from_attributes=True)


class DMSFile(SavedDMSFile):
    """Document view model containing properties visible to users who may read it."""

    created_by: Optional[ShortUser] = None
    modified_by: Optional[ShortUser] = None
