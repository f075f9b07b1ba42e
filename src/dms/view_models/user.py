from typing import Optional

from pydantic import ConfigDict

from dms.view_models.base.base import BaseModel


class ShortGroup(BaseModel):
    """Group view model containing a smaller set of properties to return in nested contexts."""

    id: int
    code: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ShortUser(BaseModel):
    """User view model containing a smaller set of properties to return in nested contexts."""

    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
