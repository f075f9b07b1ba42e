from humps import camelize
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, field_validator


class BaseModel(PydanticBaseModel):
    """
    Base of every view model. Fields are read and written in camelCase and may also be populated by their Python
    names. Surrounding whitespace is stripped from strings, and empty strings are treated as missing values.
    """

    model_config = ConfigDict(alias_generator=camelize, populate_by_name=True, str_strip_whitespace=True)

    @field_validator("*", mode="before")
    def empty_str_to_none(cls, x):
        if x == "":
            return None
        return x
